"""
Table names and media labels shared by the service layer.
"""

TABLES = {
    # One row per watched movie or episode
    'VIEWING': 'viewing',

    # user_id <-> streaming_service_id link rows
    'USER_STREAMING_SERVICE': 'user_streaming_service',

    # Catalog of platforms (name is what prompts need)
    'STREAMING_SERVICE': 'streaming_service',

    # Cached recommendation payloads, unique on (user_id, query)
    'RECOMMENDATION_CACHE': 'recommendation_cache',
}

MEDIA_TYPE_LABELS = {
    'movie': 'Movie',
    'tv': 'TV Show',
}

# Emitted instead of an empty platform list so prompts stay well-formed
NO_PLATFORMS_TOKEN = 'none set'
