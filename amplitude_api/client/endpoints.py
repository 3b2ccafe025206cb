"""Fixed Amplitude endpoint URLs and the placeholder used for anonymous users."""

TRACK_URI = "https://api.amplitude.com/httpapi"
IDENTIFY_URI = "https://api.amplitude.com/identify"
SEGMENTATION_URI = "https://amplitude.com/api/2/events/segmentation"
DELETION_URI = "https://amplitude.com/api/2/deletions/users"

# Stands in for user_id when a caller explicitly passes None.
USER_WITH_NO_ACCOUNT = "user who doesn't have an account"
