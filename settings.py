from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Client transport configuration
# Connection timeout: Time to establish TCP/TLS connection
CONNECT_TIMEOUT = config.get("CONNECT_TIMEOUT", 10.0)
# Read timeout: Time between chunks. Streams may idle for a long time between events
READ_TIMEOUT = config.get("READ_TIMEOUT", 3600.0)
VERIFY_TLS = config.get("VERIFY_TLS", True)
FOLLOW_REDIRECTS = config.get("FOLLOW_REDIRECTS", False)

# Logging
LOG_LEVEL = config.get("LOG_LEVEL", "warning")
DEBUG_LOG_FILE = config.get("DEBUG_LOG_FILE", "sse_client_debug.log")

# Stream tracing / debugging
STREAM_TRACE_ENABLED = config.get("STREAM_TRACE_ENABLED", False)
STREAM_TRACE_DIR = config.get("STREAM_TRACE_DIR", "stream_traces")
STREAM_TRACE_MAX_BYTES = config.get("STREAM_TRACE_MAX_BYTES", 262144)

# Sync server configuration
BIND_ADDRESS = config.get("HOST", "localhost")
PORT = config.get("PORT", 8080)
SYNC_COMMAND = config.get(
    "SYNC_COMMAND",
    "/usr/bin/rsync -rlptv --info=progress --delete "
    "rsync://racnoss.kde.org/applicationdata/neon "
    "/mnt/volume-do-cacher-storage/files.kde.org/",
)
