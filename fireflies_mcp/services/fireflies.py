"""Fireflies.ai GraphQL client.

Implements the tool collaborator used by the MCP dispatcher: each tool name
maps to one GraphQL document plus a function that builds its variables from
the tool arguments. The value of the first top-level field in ``data`` is
returned to the caller.
"""

import json
import logging
from collections.abc import Callable
from typing import Any

import httpx

from ..mcp.jsonrpc import ToolNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 20


class FirefliesAPIError(Exception):
    """The upstream API failed or answered with GraphQL errors."""


# ============ GRAPHQL DOCUMENTS ============

_TRANSCRIPT_LIST_FIELDS = "id title date duration organizer_email participants transcript_url"

QUERIES: dict[str, str] = {
    "get_user": (
        "query($userId:String){user(id:$userId){user_id email name num_transcripts "
        "recent_transcript recent_meeting minutes_consumed is_admin integrations}}"
    ),
    "get_users": (
        "query{users{user_id email name num_transcripts recent_transcript "
        "recent_meeting minutes_consumed is_admin}}"
    ),
    "get_user_groups": (
        "query($mine:Boolean){user_groups(mine:$mine){id name handle members{user_id name email}}}"
    ),
    "list_transcripts": (
        "query($limit:Int,$skip:Int,$userId:String,$keyword:String,$fromDate:String,"
        "$toDate:String,$organizers:[String],$participants:[String],$mine:Boolean)"
        "{transcripts(limit:$limit,skip:$skip,user_id:$userId,keyword:$keyword,"
        "fromDate:$fromDate,toDate:$toDate,organizers:$organizers,"
        f"participants:$participants,mine:$mine){{{_TRANSCRIPT_LIST_FIELDS} meeting_link}}}}"
    ),
    "get_transcript": (
        "query($transcriptId:String!){transcript(id:$transcriptId){id title date duration "
        "organizer_email participants transcript_url audio_url video_url meeting_link privacy "
        "speakers{id name email}meeting_attendance{name email join_time leave_time}}}"
    ),
    "get_transcript_sentences": (
        "query($transcriptId:String!){transcript(id:$transcriptId){id title sentences{index "
        "text raw_text start_time end_time speaker_id speaker_name "
        "ai_filters{task pricing date_and_time question sentiment}}}}"
    ),
    "get_meeting_summary": (
        "query($transcriptId:String!){transcript(id:$transcriptId){id title summary{overview "
        "shorthand_bullet action_items outline keywords meeting_attendees short_summary "
        "topics_discussed}}}"
    ),
    "get_meeting_analytics": (
        "query($transcriptId:String!){transcript(id:$transcriptId){id title meeting_analytics"
        "{speaker_talk_time{speaker_id speaker_name talk_time percentage}total_duration "
        "question_count sentiment{positive negative neutral}}}}"
    ),
    "get_meeting_attendees": (
        "query($transcriptId:String!){transcript(id:$transcriptId){id title "
        "meeting_attendees{name email phone_number}"
        "meeting_attendance{name email join_time leave_time duration}}}"
    ),
    "search_transcripts": (
        "query($keyword:String!,$scope:String,$limit:Int,$skip:Int,$fromDate:String,"
        "$toDate:String){transcripts(keyword:$keyword,scope:$scope,limit:$limit,skip:$skip,"
        f"fromDate:$fromDate,toDate:$toDate){{{_TRANSCRIPT_LIST_FIELDS}}}}}"
    ),
    "get_ai_apps": (
        "query($transcriptId:String,$appId:String,$limit:Int,$skip:Int)"
        "{apps(transcript_id:$transcriptId,app_id:$appId,limit:$limit,skip:$skip)"
        "{outputs{transcript_id user_id app_id created_at title prompt response}}}"
    ),
    "upload_audio": (
        "mutation($input:AudioUploadInput!){uploadAudio(input:$input){success title message}}"
    ),
    "add_to_live": (
        "mutation($meetingLink:String!,$title:String)"
        "{addToLive(meeting_link:$meetingLink,title:$title){success message}}"
    ),
    "delete_transcript": (
        "mutation($transcriptId:String!){deleteTranscript(id:$transcriptId){success message}}"
    ),
    "update_meeting_title": (
        "mutation($transcriptId:String!,$title:String!)"
        "{updateMeetingTitle(id:$transcriptId,title:$title){success message}}"
    ),
    "update_meeting_privacy": (
        "mutation($transcriptId:String!,$privacy:String!)"
        "{updateMeetingPrivacy(id:$transcriptId,privacy:$privacy){success message}}"
    ),
    "create_soundbite": (
        "mutation($transcriptId:ID!,$startTime:Float!,$endTime:Float!,$name:String,"
        "$summary:String,$visibility:[String]){createBite(transcript_id:$transcriptId,"
        "start_time:$startTime,end_time:$endTime,name:$name,summary:$summary,"
        "visibility:$visibility){id status name summary}}"
    ),
    "set_user_role": (
        "mutation($userId:String!,$role:String!)"
        "{setUserRole(user_id:$userId,role:$role){success message}}"
    ),
}


# ============ VARIABLE BUILDERS ============


def _pick(*keys: str) -> Callable[[dict[str, Any]], dict[str, Any]]:
    return lambda args: {key: args.get(key) for key in keys}


def _list_transcripts_vars(args: dict[str, Any]) -> dict[str, Any]:
    variables = _pick(
        "skip", "userId", "keyword", "fromDate", "toDate", "organizers", "participants", "mine"
    )(args)
    variables["limit"] = args.get("limit") or DEFAULT_LIST_LIMIT
    return variables


def _search_transcripts_vars(args: dict[str, Any]) -> dict[str, Any]:
    variables = _pick("keyword", "skip", "fromDate", "toDate")(args)
    variables["scope"] = args.get("scope") or "all"
    variables["limit"] = args.get("limit") or DEFAULT_LIST_LIMIT
    return variables


def _upload_audio_vars(args: dict[str, Any]) -> dict[str, Any]:
    return {"input": _drop_none(_pick("url", "title", "webhook", "attendees")(args))}


VARIABLE_BUILDERS: dict[str, Callable[[dict[str, Any]], dict[str, Any]]] = {
    "get_user": _pick("userId"),
    "get_users": _pick(),
    "get_user_groups": _pick("mine"),
    "list_transcripts": _list_transcripts_vars,
    "get_transcript": _pick("transcriptId"),
    "get_transcript_sentences": _pick("transcriptId"),
    "get_meeting_summary": _pick("transcriptId"),
    "get_meeting_analytics": _pick("transcriptId"),
    "get_meeting_attendees": _pick("transcriptId"),
    "search_transcripts": _search_transcripts_vars,
    "get_ai_apps": _pick("transcriptId", "appId", "limit", "skip"),
    "upload_audio": _upload_audio_vars,
    "add_to_live": _pick("meetingLink", "title"),
    "delete_transcript": _pick("transcriptId"),
    "update_meeting_title": _pick("transcriptId", "title"),
    "update_meeting_privacy": _pick("transcriptId", "privacy"),
    "create_soundbite": _pick(
        "transcriptId", "startTime", "endTime", "name", "summary", "visibility"
    ),
    "set_user_role": _pick("userId", "role"),
}


def _drop_none(values: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}


def build_variables(name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    """Map tool arguments to GraphQL variables, omitting unset values."""
    builder = VARIABLE_BUILDERS.get(name)
    if builder is None:
        raise ToolNotFoundError(name)
    return _drop_none(builder(arguments))


# ============ CLIENT ============


class FirefliesClient:
    """Async client for the Fireflies GraphQL endpoint.

    Owns one httpx.AsyncClient for the lifetime of the application;
    call ``aclose()`` on shutdown.
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str = "https://api.fireflies.ai/graphql",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.endpoint = endpoint
        self._http = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
            },
        )

    async def graphql_request(self, query: str, variables: dict[str, Any] | None = None) -> dict:
        """POST one GraphQL document and return its ``data`` member.

        Raises:
            FirefliesAPIError: on transport failure, a non-2xx status, or a
                response carrying GraphQL ``errors``.
        """
        try:
            response = await self._http.post(
                self.endpoint, json={"query": query, "variables": variables or {}}
            )
        except httpx.HTTPError as e:
            raise FirefliesAPIError(f"Fireflies API request failed: {e}") from e

        if response.is_error:
            raise FirefliesAPIError(f"Fireflies API error {response.status_code}: {response.text}")

        try:
            result = response.json()
        except ValueError as e:
            raise FirefliesAPIError(f"Fireflies API returned invalid JSON: {e}") from e

        if result.get("errors"):
            raise FirefliesAPIError(f"GraphQL error: {json.dumps(result['errors'])}")
        return result.get("data") or {}

    async def invoke_tool(self, name: str, arguments: dict[str, Any]) -> Any:
        """Run tool ``name`` and return the first top-level field of the result."""
        query = QUERIES.get(name)
        if query is None:
            raise ToolNotFoundError(name)

        variables = build_variables(name, arguments)
        logger.debug(f"Invoking {name} with variables {sorted(variables)}")
        data = await self.graphql_request(query, variables)
        return next(iter(data.values()), None)

    async def aclose(self) -> None:
        await self._http.aclose()
