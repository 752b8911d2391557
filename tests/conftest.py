import os
import warnings

# Ignore warnings from app.shared
warnings.filterwarnings("ignore", category=DeprecationWarning, module="app.shared.*")

# Set test environment variables before any app module reads the config
os.environ.update(
    {
        "DEMO_MODE": "true",
        "COMPANION_STORAGE": "memory",
        "LEVELHEAD_SECRET": "levelhead-test-secret",
        "LOGFIRE_ENABLE": "false",
    }
)

# Import fixtures so they are available to all tests
from tests.fixtures.companion_fixtures import *  # noqa: E402, F403
from tests.fixtures.mongo_fixtures import *  # noqa: E402, F403
