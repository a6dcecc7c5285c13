import os

# Database Configuration
# Uses default credentials for local Docker Compose setup
DB_URL = os.getenv("DATABASE_URL", "postgres://user:password@db:5432/order_sync_db")

# Application Metadata
PROJECT_NAME = "Order Sync Service"
VERSION = "1.2.1"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Outbound webhook delivery
SYNC_ENDPOINT_PATH = os.getenv("SYNC_ENDPOINT_PATH", "/api/v1/woocommerce-sync")
SYNC_TIMEOUT = float(os.getenv("SYNC_TIMEOUT", 30)) # Seconds before a delivery is treated as a transport failure
SIGNATURE_HEADER = "X-WC-Webhook-Signature"

# Seeds for the persisted sync settings (only used when no settings exist yet)
DEFAULT_ENDPOINT_BASE_URL = os.getenv("SYNC_ENDPOINT_BASE_URL", "")
DEFAULT_WEBHOOK_SECRET = os.getenv("SYNC_WEBHOOK_SECRET", "")
DEFAULT_SYNC_STATUSES = ["completed", "processing"]
MIN_SECRET_LENGTH = 10

# Per-order "sync in progress" marker lifetime, must outlive one delivery
SYNC_LOCK_TTL = int(os.getenv("SYNC_LOCK_TTL", 60))

# Operator retries allowed per failed attempt chain
MAX_MANUAL_RETRIES = int(os.getenv("MAX_MANUAL_RETRIES", 5))

# Outbox Poller Configuration (runs the asynchronous syncs)
POLLING_INTERVAL = int(os.getenv("POLLING_INTERVAL", 1)) # Poller checks for new events every N seconds
MAX_ATTEMPTS = int(os.getenv("MAX_ATTEMPTS", 5)) # Max dispatch attempts for an event
BATCH_SIZE = int(os.getenv("BATCH_SIZE", 50)) # How many events to fetch per poll

# Log viewer paging
DEFAULT_PAGE_SIZE = 20
