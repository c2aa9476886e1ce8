"""Centralized constants for Spotify Bridge."""

# Call executor
MAX_ATTEMPTS = 10
RATE_LIMIT_MARGIN_SECONDS = 1
TRANSIENT_RETRY_SECONDS = 10
REQUEST_TIMEOUT_SECONDS = 15

# Interactive login
LOGIN_TIMEOUT_SECONDS = 10 * 60
LOGIN_TIMEOUT_EXIT_CODE = 182
LOGIN_CALLBACK_PATH = "/callback"
LOGIN_SUCCESS_MESSAGE = "Successfully logged in!"

# Default provider endpoints
DEFAULT_API_BASE_URL = "https://api.spotify.com/v1"
DEFAULT_AUTH_URL = "https://accounts.spotify.com/authorize"
DEFAULT_TOKEN_URL = "https://accounts.spotify.com/api/token"

# Credential file keys
CLIENT_ID_KEY = "client_id"
CLIENT_SECRET_KEY = "client_secret"
ACCESS_TOKEN_KEY = "access_token"
REFRESH_TOKEN_KEY = "refresh_token"
DEFAULT_CREDENTIALS_FILE = "spotifybot.properties"

# Resource batch limits
MAX_ARTIST_FETCH_LIMIT = 50
MAX_ALBUM_FETCH_LIMIT = 50
MAX_SEVERAL_ALBUMS_LIMIT = 20
MAX_TRACK_FETCH_LIMIT = 50
PLAYLIST_INTERACTION_LIMIT = 100
MAX_ALBUM_TRACK_FETCH_LIMIT = 50
TRACK_SEARCH_LIMIT = 10
TRACK_URI_PREFIX = "spotify:track:"
