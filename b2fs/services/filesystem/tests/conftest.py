import pytest

from b2fs.services.filesystem.b2_filesystem import B2FileSystem
from b2fs.services.logger.memory_logger import MemoryLogger
from b2fs.services.object_storage.memory_client import MemoryObjectStorageClient

BUCKET_ID = "bucket-id"
BUCKET_NAME = "bucket-name"


@pytest.fixture
def client():
    return MemoryObjectStorageClient(buckets={BUCKET_ID: BUCKET_NAME})


@pytest.fixture
def log():
    return MemoryLogger()


@pytest.fixture
def fs(client, log):
    return B2FileSystem(client, BUCKET_ID, logger=log)
