# cli.py
import logging
from pathlib import Path

import click

from uploads_api.adapters.records import DynamoDBRecordStore, create_record_store
from uploads_api.aws.clients import create_dynamodb_client, create_s3_client
from uploads_api.client import FilesClient, FilesClientError
from uploads_api.config.settings import get_settings
from uploads_api.s3.buckets import allow_browser_uploads, ensure_bucket
from uploads_api.s3.event_notify import enable_upload_notifications
from uploads_api.utils.logs import configure_logging

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8000"


@click.group()
@click.option("--log-level", default=None, help="Override the configured logging level")
def cli(log_level):
    """CLI commands for the Uploads API"""
    configure_logging(log_level or get_settings().log_level)


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    click.echo("Current Configuration:")
    click.echo(f"  Deployment Mode: {settings.deployment_mode}")
    click.echo(f"  AWS Region: {settings.aws_region}")
    click.echo(f"  AWS Endpoint: {settings.aws_endpoint_url}")
    click.echo(f"  S3 Bucket: {settings.s3_bucket_name}")
    click.echo(f"  Upload Prefix: {settings.upload_prefix}")
    click.echo(f"  URL Expiry: {settings.presigned_url_expiry_seconds}s")
    click.echo(f"  Record Store: {settings.record_store_backend}")
    if settings.record_store_backend == "dynamodb":
        click.echo(f"  Files Table: {settings.files_table_name}")
    else:
        click.echo(f"  SQLite DB: {settings.sqlite_db_path}")


@cli.command()
@click.option("--queue-arn", default=None, help="SQS queue receiving upload events")
@click.option("--lambda-arn", default=None, help="Lambda function receiving upload events")
def create_resources(queue_arn, lambda_arn):
    """Create the bucket and the record store, optionally wiring upload notifications"""
    settings = get_settings()
    s3_client = create_s3_client(settings)

    created = ensure_bucket(s3_client, settings.s3_bucket_name, settings.aws_region)
    click.echo(f"{'Created' if created else 'Found'} bucket {settings.s3_bucket_name}")
    allow_browser_uploads(s3_client, settings.s3_bucket_name, settings.cors_allow_origins)

    if settings.record_store_backend == "dynamodb":
        store = DynamoDBRecordStore(create_dynamodb_client(settings), settings.files_table_name)
        created = store.create_table()
        click.echo(f"{'Created' if created else 'Found'} table {settings.files_table_name}")
    else:
        create_record_store(settings)
        click.echo(f"Initialized SQLite record store at {settings.sqlite_db_path}")

    if queue_arn or lambda_arn:
        enable_upload_notifications(
            s3_client,
            settings.s3_bucket_name,
            prefix=settings.upload_prefix,
            queue_arn=queue_arn,
            lambda_arn=lambda_arn,
        )
        click.echo(f"Upload notifications sent to {queue_arn or lambda_arn}")


@cli.command()
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
def serve(host, port):
    """Run the API with uvicorn"""
    import uvicorn

    from uploads_api.main import create_app

    uvicorn.run(create_app(get_settings()), host=host, port=port)


api_url_option = click.option(
    "--api-url", envvar="UPLOADS_API_URL", default=DEFAULT_API_URL, show_default=True,
    help="Base URL of the Uploads API",
)


@cli.command()
@api_url_option
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--type", "file_type", default=None, help="MIME type (guessed from the name if omitted)")
def upload(api_url, path, file_type):
    """Upload a local file through a presigned URL"""
    try:
        file_id = FilesClient(api_url).upload(path, file_type=file_type)
    except FilesClientError as e:
        raise click.ClickException(f"Upload failed: {e.message}")
    click.echo(file_id)


@cli.command(name="ls")
@api_url_option
def list_files(api_url):
    """List uploaded files"""
    try:
        records = FilesClient(api_url).list_files()
    except FilesClientError as e:
        raise click.ClickException(f"Listing failed: {e.message}")
    for record in records:
        click.echo(
            f"{record['fileId']}  {record['status']:<9}  {record['fileSize']:>10}  "
            f"{record['fileType']:<24}  {record['fileName']}"
        )


@cli.command()
@api_url_option
@click.argument("file_id")
@click.argument("destination", type=click.Path(dir_okay=False, writable=True, path_type=Path))
def download(api_url, file_id, destination):
    """Download a file to DESTINATION"""
    try:
        content = FilesClient(api_url).download(file_id)
    except FilesClientError as e:
        raise click.ClickException(f"Download failed: {e.message}")
    destination.write_bytes(content)
    click.echo(f"Wrote {len(content)} bytes to {destination}")


@cli.command(name="rm")
@api_url_option
@click.argument("file_id")
def delete(api_url, file_id):
    """Delete a file and its record"""
    try:
        message = FilesClient(api_url).delete_file(file_id)
    except FilesClientError as e:
        raise click.ClickException(f"Delete failed: {e.message}")
    click.echo(message)


if __name__ == "__main__":
    cli()
