TEST_BUCKET_NAME = "test-uploads-bucket"
TEST_TABLE_NAME = "test-files"
TEST_REGION = "us-east-1"
TEST_QUEUE_ARN = "arn:aws:sqs:us-east-1:123456789012:test-queue"
