"""MCP Tool Definitions for the Fireflies.ai server.

This module contains all tool definitions returned by the tools/list method.
Each tool definition includes the schema for its input parameters.

Tool Categories:
    - Users: get_user, get_users, get_user_groups
    - Transcripts: list_transcripts, get_transcript, get_transcript_sentences,
      get_meeting_summary, get_meeting_analytics, get_meeting_attendees,
      search_transcripts
    - AI Apps: get_ai_apps
    - Mutations: upload_audio, add_to_live, delete_transcript,
      update_meeting_title, update_meeting_privacy, create_soundbite,
      set_user_role

Array properties always declare ``items`` so the schemas stay valid for
OpenAI-compatible clients.
"""

from typing import Any

_TRANSCRIPT_ID_ONLY = {
    "type": "object",
    "properties": {"transcriptId": {"type": "string"}},
    "required": ["transcriptId"],
}

TOOL_DEFINITIONS: list[dict[str, Any]] = [
    # ============ USERS ============
    {
        "name": "get_user",
        "description": "Get user info (email, name, integrations, minutes consumed, admin status)",
        "inputSchema": {
            "type": "object",
            "properties": {
                "userId": {"type": "string", "description": "Optional user ID"},
            },
        },
    },
    {
        "name": "get_users",
        "description": "Get all team users with details",
        "inputSchema": {"type": "object", "properties": {}},
    },
    {
        "name": "get_user_groups",
        "description": "Get user groups with members",
        "inputSchema": {
            "type": "object",
            "properties": {
                "mine": {"type": "boolean", "description": "Only groups user belongs to"},
            },
        },
    },
    # ============ TRANSCRIPTS ============
    {
        "name": "list_transcripts",
        "description": "List transcripts with filters (date, organizer, participants, keywords)",
        "inputSchema": {
            "type": "object",
            "properties": {
                "limit": {"type": "number"},
                "skip": {"type": "number"},
                "userId": {"type": "string"},
                "keyword": {"type": "string"},
                "fromDate": {"type": "string"},
                "toDate": {"type": "string"},
                "organizers": {"type": "array", "items": {"type": "string"}},
                "participants": {"type": "array", "items": {"type": "string"}},
                "mine": {"type": "boolean"},
            },
        },
    },
    {
        "name": "get_transcript",
        "description": "Get transcript details with speakers and URLs",
        "inputSchema": _TRANSCRIPT_ID_ONLY,
    },
    {
        "name": "get_transcript_sentences",
        "description": "Get sentences with speaker ID, timestamps, AI filters",
        "inputSchema": _TRANSCRIPT_ID_ONLY,
    },
    {
        "name": "get_meeting_summary",
        "description": "Get AI summary, action items, keywords, topics",
        "inputSchema": _TRANSCRIPT_ID_ONLY,
    },
    {
        "name": "get_meeting_analytics",
        "description": "Get talk time, sentiment, question count",
        "inputSchema": _TRANSCRIPT_ID_ONLY,
    },
    {
        "name": "get_meeting_attendees",
        "description": "Get attendee info with join/leave times",
        "inputSchema": _TRANSCRIPT_ID_ONLY,
    },
    {
        "name": "search_transcripts",
        "description": "Search by keyword with scope (title/sentences/all)",
        "inputSchema": {
            "type": "object",
            "properties": {
                "keyword": {"type": "string"},
                "scope": {"type": "string", "enum": ["title", "sentences", "all"]},
                "limit": {"type": "number"},
                "skip": {"type": "number"},
                "fromDate": {"type": "string"},
                "toDate": {"type": "string"},
            },
            "required": ["keyword"],
        },
    },
    # ============ AI APPS ============
    {
        "name": "get_ai_apps",
        "description": "Get AI Apps outputs for transcripts",
        "inputSchema": {
            "type": "object",
            "properties": {
                "transcriptId": {"type": "string"},
                "appId": {"type": "string"},
                "limit": {"type": "number"},
                "skip": {"type": "number"},
            },
        },
    },
    # ============ MUTATIONS ============
    {
        "name": "upload_audio",
        "description": "Upload audio URL for transcription",
        "inputSchema": {
            "type": "object",
            "properties": {
                "url": {"type": "string"},
                "title": {"type": "string"},
                "webhook": {"type": "string"},
                "attendees": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["url", "title"],
        },
    },
    {
        "name": "add_to_live",
        "description": "Add bot to live meeting (Zoom/Meet/Teams)",
        "inputSchema": {
            "type": "object",
            "properties": {
                "meetingLink": {"type": "string"},
                "title": {"type": "string"},
            },
            "required": ["meetingLink"],
        },
    },
    {
        "name": "delete_transcript",
        "description": "Delete transcript permanently",
        "inputSchema": _TRANSCRIPT_ID_ONLY,
    },
    {
        "name": "update_meeting_title",
        "description": "Update meeting title",
        "inputSchema": {
            "type": "object",
            "properties": {
                "transcriptId": {"type": "string"},
                "title": {"type": "string"},
            },
            "required": ["transcriptId", "title"],
        },
    },
    {
        "name": "update_meeting_privacy",
        "description": "Update privacy (link/owner/participants/teammates)",
        "inputSchema": {
            "type": "object",
            "properties": {
                "transcriptId": {"type": "string"},
                "privacy": {
                    "type": "string",
                    "enum": [
                        "link",
                        "owner",
                        "participants",
                        "teammatesandparticipants",
                        "teammates",
                    ],
                },
            },
            "required": ["transcriptId", "privacy"],
        },
    },
    {
        "name": "create_soundbite",
        "description": "Create soundbite clip from transcript",
        "inputSchema": {
            "type": "object",
            "properties": {
                "transcriptId": {"type": "string"},
                "startTime": {"type": "number"},
                "endTime": {"type": "number"},
                "name": {"type": "string"},
                "summary": {"type": "string"},
                "visibility": {
                    "type": "array",
                    "items": {"type": "string", "enum": ["public", "team", "participants"]},
                },
            },
            "required": ["transcriptId", "startTime", "endTime"],
        },
    },
    {
        "name": "set_user_role",
        "description": "Set user role (admin/user/viewer)",
        "inputSchema": {
            "type": "object",
            "properties": {
                "userId": {"type": "string"},
                "role": {"type": "string", "enum": ["admin", "user", "viewer"]},
            },
            "required": ["userId", "role"],
        },
    },
]

# Grouping used by the descriptive root endpoint
TOOL_CATEGORIES: dict[str, list[str]] = {
    "users": ["get_user", "get_users", "get_user_groups"],
    "transcripts": [
        "list_transcripts",
        "get_transcript",
        "get_transcript_sentences",
        "get_meeting_summary",
        "get_meeting_analytics",
        "get_meeting_attendees",
        "search_transcripts",
    ],
    "aiApps": ["get_ai_apps"],
    "mutations": [
        "upload_audio",
        "add_to_live",
        "delete_transcript",
        "update_meeting_title",
        "update_meeting_privacy",
        "create_soundbite",
        "set_user_role",
    ],
}

TOOL_NAMES: frozenset[str] = frozenset(t["name"] for t in TOOL_DEFINITIONS)
