# API prefixes
API_V1_1_PREFIX = "https://api.twitter.com/1.1/"
API_V1_1_UPLOAD_PREFIX = "https://upload.twitter.com/1.1/"
API_V1_1_STREAM_PREFIX = "https://stream.twitter.com/1.1/"
API_V2_PREFIX = "https://api.twitter.com/2/"
API_V2_LABS_PREFIX = "https://api.twitter.com/labs/2/"
OAUTH2_TOKEN_URL = "https://api.twitter.com/oauth2/token"

# Headers
HEADER_USER_AGENT = "x-user-agent"
HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_TYPE = "content-type"
HEADER_CONTENT_LENGTH = "content-length"
HEADER_ACCEPT_ENCODING = "accept-encoding"

# Rate limit headers
HEADER_RATE_LIMIT_LIMIT = "x-rate-limit-limit"
HEADER_RATE_LIMIT_REMAINING = "x-rate-limit-remaining"
HEADER_RATE_LIMIT_RESET = "x-rate-limit-reset"
HEADER_APP_LIMIT_24H_LIMIT = "x-app-limit-24hour-limit"
HEADER_APP_LIMIT_24H_REMAINING = "x-app-limit-24hour-remaining"
HEADER_APP_LIMIT_24H_RESET = "x-app-limit-24hour-reset"
HEADER_USER_LIMIT_24H_LIMIT = "x-user-limit-24hour-limit"
HEADER_USER_LIMIT_24H_REMAINING = "x-user-limit-24hour-remaining"
HEADER_USER_LIMIT_24H_RESET = "x-user-limit-24hour-reset"

# Content types
CONTENT_TYPE_JSON = "application/json;charset=UTF-8"
CONTENT_TYPE_FORM_URLENCODED = "application/x-www-form-urlencoded;charset=UTF-8"

# Environment variables
ENV_BEARER_TOKEN = "TWITTER_BEARER_TOKEN"
ENV_API_KEY = "TWITTER_API_KEY"
ENV_API_SECRET = "TWITTER_API_SECRET"
ENV_ACCESS_TOKEN = "TWITTER_ACCESS_TOKEN"
ENV_ACCESS_SECRET = "TWITTER_ACCESS_SECRET"
ENV_CLIENT_ID = "TWITTER_CLIENT_ID"
ENV_CLIENT_SECRET = "TWITTER_CLIENT_SECRET"

# HTTP methods whose semantics include a request body
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})

SDK_NAME = "Python.twitter-api-core"
SDK_VERSION = "0.1.0"
DEFAULT_TIMEOUT = 30.0
