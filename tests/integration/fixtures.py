"""Mock responses for X API integration tests."""

from __future__ import annotations

# X API v2 responses
ME_RESPONSE = {
    "data": {
        "id": "2244994945",
        "name": "X Dev",
        "username": "XDevelopers",
        "description": "The voice of the X Dev team",
        "created_at": "2013-12-14T04:35:55.000Z",
    }
}

POST_RESPONSE = {
    "data": {
        "id": "1234567890",
        "text": "Hello from integration test!",
        "edit_history_tweet_ids": ["1234567890"],
    }
}

RATE_LIMIT_RESPONSE = {
    "title": "Too Many Requests",
    "detail": "Too Many Requests",
    "type": "about:blank",
    "status": 429,
}

# X API v1.1 media upload responses
MEDIA_UPLOAD_IMAGE_RESPONSE = {
    "media_id": 1234567890123456789,
    "media_id_string": "1234567890123456789",
    "media_key": "3_1234567890123456789",
    "size": 12345,
    "expires_after_secs": 86400,
    "image": {
        "image_type": "image/png",
        "w": 1200,
        "h": 675,
    },
}

MEDIA_UPLOAD_VIDEO_INIT_RESPONSE = {
    "media_id": 9876543210987654321,
    "media_id_string": "9876543210987654321",
    "media_key": "7_9876543210987654321",
    "expires_after_secs": 86400,
}

MEDIA_UPLOAD_VIDEO_FINALIZE_RESPONSE = {
    "media_id": 9876543210987654321,
    "media_id_string": "9876543210987654321",
    "media_key": "7_9876543210987654321",
    "size": 5242880,
    "expires_after_secs": 86400,
    "processing_info": {
        "state": "pending",
        "check_after_secs": 1,
    },
}

MEDIA_UPLOAD_VIDEO_STATUS_PROCESSING = {
    "media_id": 9876543210987654321,
    "media_id_string": "9876543210987654321",
    "processing_info": {
        "state": "in_progress",
        "check_after_secs": 2,
        "progress_percent": 50,
    },
}

MEDIA_UPLOAD_VIDEO_STATUS_SUCCEEDED = {
    "media_id": 9876543210987654321,
    "media_id_string": "9876543210987654321",
    "processing_info": {
        "state": "succeeded",
        "progress_percent": 100,
    },
    "video": {
        "video_type": "video/mp4",
    },
}

MEDIA_UPLOAD_VIDEO_STATUS_FAILED = {
    "media_id": 9876543210987654321,
    "media_id_string": "9876543210987654321",
    "processing_info": {
        "state": "failed",
        "error": {
            "code": 1,
            "name": "InvalidMedia",
            "message": "Invalid video format",
        },
    },
}
