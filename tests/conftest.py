from tests.fixtures.app import (  # noqa: F401
    client,
    file_service,
    record_store,
    sqlite_store,
    app_settings,
)
from tests.fixtures.aws import (  # noqa: F401
    aws_credentials,
    dynamodb_client,
    mocked_aws,
    s3_client,
)
