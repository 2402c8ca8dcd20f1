# Environment variables
ENV_BASE_URL = "REQUESTKIT_BASE_URL"
ENV_TIMEOUT = "REQUESTKIT_TIMEOUT"
ENV_SSL_CERT_FILE = "SSL_CERT_FILE"
ENV_REQUESTS_CA_BUNDLE = "REQUESTS_CA_BUNDLE"
ENV_SSL_CERT_DIR = "SSL_CERT_DIR"

DOTENV_FILE = ".env"

# Headers
HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_TYPE = "Content-Type"

# Defaults
DEFAULT_TIMEOUT = 30.0
DEFAULT_STATUS_CODE = 200

# Inclusive range of status codes classified as HTTP errors
HTTP_ERROR_STATUS_RANGE = range(300, 600)

# Payload substituted for an empty body when no content is expected
EMPTY_OBJECT_PAYLOAD = b"{}"
