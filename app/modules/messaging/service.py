from supabase import Client
from fastapi import HTTPException, UploadFile
from app.config import settings
from app.config.permissions_config import CONTRACTOR_USER_TYPES
from app.modules.media.storage import MediaStorage, file_extension
from app.modules.messaging.alias_service import ContractorAliasService
from app.modules.messaging.schemas import (
    AttachmentResponse, FormattedMessage, SendMessageResponse, MarkReadResponse
)
from typing import Dict, List, Optional, Tuple
from datetime import datetime, timezone
import logging
import uuid

logger = logging.getLogger(__name__)


class MessagingService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.aliases = ContractorAliasService(supabase)
        self.storage = MediaStorage(supabase, settings.attachments_bucket)

    def _bidder_ids(self, project: dict) -> List[str]:
        """Contractors holding a non-withdrawn bid on the project"""
        result = self.supabase.table("bids")\
            .select("contractor_id")\
            .eq("project_id", project["id"])\
            .neq("status", "withdrawn")\
            .execute()
        ids = []
        for bid in result.data or []:
            cid = bid.get("contractor_id")
            if cid and cid != project.get("owner_id") and cid not in ids:
                ids.append(cid)
        return ids

    def _resolve_recipients(
        self,
        project: dict,
        sender_id: str,
        message_type: str,
        recipient_id: Optional[str],
        sender_user_type: Optional[str]
    ) -> List[str]:
        is_owner = sender_id == project.get("owner_id")

        if message_type == "group":
            if not is_owner:
                raise HTTPException(status_code=403, detail="Only the project owner can send group messages")
            recipients = self._bidder_ids(project)
            if not recipients:
                raise HTTPException(status_code=400, detail="No contractors to message on this project")
            return recipients

        if not recipient_id:
            raise HTTPException(status_code=400, detail="recipient_id is required for individual messages")
        if recipient_id == sender_id:
            raise HTTPException(status_code=400, detail="Cannot send a message to yourself")

        if is_owner:
            if not self.aliases.is_contractor(project, recipient_id):
                raise HTTPException(status_code=403, detail="Recipient is not a contractor on this project")
            return [recipient_id]

        # a contractor-type user becomes a contractor on the project by messaging its owner
        if not (sender_user_type in CONTRACTOR_USER_TYPES
                or self.aliases.is_contractor(project, sender_id, sender_user_type)):
            raise HTTPException(status_code=403, detail="You are not a participant in this project")
        if recipient_id != project.get("owner_id"):
            raise HTTPException(status_code=403, detail="Contractors can only message the project owner")
        return [recipient_id]

    async def _read_files(self, files: Optional[List[UploadFile]]) -> List[Tuple[UploadFile, bytes]]:
        contents = []
        for file in files or []:
            if not file or not file.filename:
                continue
            content = await file.read()
            if len(content) > settings.max_upload_bytes:
                raise HTTPException(
                    status_code=413,
                    detail=f"File {file.filename} exceeds maximum size of {settings.max_upload_bytes} bytes"
                )
            contents.append((file, content))
        return contents

    def _store_attachments(self, message_id: str, files: List[Tuple[UploadFile, bytes]]) -> List[dict]:
        stored = []
        for file, content in files:
            content_type = file.content_type or "application/octet-stream"
            path = f"message-attachments/{message_id}/{uuid.uuid4()}.{file_extension(file.filename)}"
            try:
                self.storage.upload(content, path, content_type)
                result = self.supabase.table("message_attachments").insert({
                    "message_id": message_id,
                    "file_name": file.filename,
                    "file_size": len(content),
                    "file_type": content_type,
                    "file_url": self.storage.public_url(path),
                }).execute()
                stored.extend(result.data or [])
            except Exception as e:
                logger.warning(f"Skipping attachment {file.filename} on message {message_id}: {e}")
        return stored

    def _discard_message(self, message_id: str) -> None:
        try:
            self.supabase.table("messages").delete().eq("id", message_id).execute()
            logger.info(f"Discarded message {message_id} after recipient insert failed")
        except Exception as e:
            logger.warning(f"Could not discard message {message_id}: {e}")

    async def send_message(
        self,
        project_id: str,
        sender_id: str,
        content: str,
        message_type: str = "individual",
        recipient_id: Optional[str] = None,
        files: Optional[List[UploadFile]] = None,
        sender_user_type: Optional[str] = None
    ) -> SendMessageResponse:
        """Store a message, its recipient rows and attachments"""
        if not content or not content.strip():
            raise HTTPException(status_code=400, detail="Message content cannot be empty")
        project = self.aliases.get_project(project_id)
        try:
            recipients = self._resolve_recipients(project, sender_id, message_type, recipient_id, sender_user_type)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to resolve recipients: {str(e)}")
        file_contents = await self._read_files(files)

        sender_alias = None
        if sender_id != project.get("owner_id"):
            sender_alias = self.aliases.ensure_contractor_alias(project_id, sender_id)

        try:
            result = self.supabase.table("messages").insert({
                "project_id": project_id,
                "sender_id": sender_id,
                "content": content.strip(),
                "message_type": message_type,
                "contractor_alias": sender_alias,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to send message")
            message = result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to send message: {str(e)}")

        try:
            self.supabase.table("message_recipients").insert([
                {"message_id": message["id"], "recipient_id": rid} for rid in recipients
            ]).execute()
        except Exception as e:
            # no message row may outlive a failed recipient insert
            self._discard_message(message["id"])
            raise HTTPException(status_code=500, detail=f"Failed to send message: {str(e)}")

        attachments = self._store_attachments(message["id"], file_contents)
        logger.info(f"Message {message['id']} sent on project {project_id} to {len(recipients)} recipient(s)")
        formatted = self._format_message(
            message, project, sender_id, attachments, None, {sender_id: sender_alias} if sender_alias else {}
        )
        return SendMessageResponse(message=formatted, recipient_ids=recipients)

    def _format_message(
        self,
        message: dict,
        project: dict,
        viewer_id: str,
        attachments: List[dict],
        read_at,
        alias_map: Dict[str, str]
    ) -> FormattedMessage:
        sender_id = message["sender_id"]
        from_owner = sender_id == project.get("owner_id")
        return FormattedMessage(
            id=message["id"],
            sender_id=sender_id,
            sender_alias=None if from_owner else (message.get("contractor_alias") or alias_map.get(sender_id)),
            sender_role="homeowner" if from_owner else "contractor",
            content=message["content"],
            timestamp=message["created_at"],
            is_own=sender_id == viewer_id,
            is_group=message.get("message_type") == "group",
            read_at=read_at,
            attachments=[AttachmentResponse(**a) for a in attachments],
        )

    def get_project_messages(
        self,
        project_id: str,
        viewer_id: str,
        contractor_id: Optional[str] = None,
        as_owner: bool = False
    ) -> List[FormattedMessage]:
        """Messages on the project visible to viewer_id, oldest first.

        The owner (or as_owner, for admins) sees every message, optionally
        narrowed to the thread with contractor_id. Contractors see what they
        sent or received.
        """
        project = self.aliases.get_project(project_id)
        owner_view = as_owner or viewer_id == project.get("owner_id")
        if not owner_view and not self.aliases.is_contractor(project, viewer_id):
            raise HTTPException(status_code=403, detail="You are not a participant in this project")

        try:
            result = self.supabase.table("messages")\
                .select("*")\
                .eq("project_id", project_id)\
                .order("created_at")\
                .execute()
            messages = result.data or []
            if not messages:
                return []
            message_ids = [m["id"] for m in messages]

            recipient_rows = self.supabase.table("message_recipients")\
                .select("message_id, recipient_id, read_at")\
                .in_("message_id", message_ids)\
                .execute()
            recipients: Dict[str, Dict[str, Optional[str]]] = {}
            for row in recipient_rows.data or []:
                recipients.setdefault(row["message_id"], {})[row["recipient_id"]] = row.get("read_at")

            if owner_view:
                if contractor_id:
                    messages = [
                        m for m in messages
                        if m["sender_id"] == contractor_id or contractor_id in recipients.get(m["id"], {})
                    ]
            else:
                messages = [
                    m for m in messages
                    if m["sender_id"] == viewer_id or viewer_id in recipients.get(m["id"], {})
                ]
            if not messages:
                return []

            attachment_rows = self.supabase.table("message_attachments")\
                .select("*")\
                .in_("message_id", [m["id"] for m in messages])\
                .execute()
            attachments: Dict[str, List[dict]] = {}
            for row in attachment_rows.data or []:
                attachments.setdefault(row["message_id"], []).append(row)

            alias_map = self.aliases.get_alias_map(project_id)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to load messages: {str(e)}")

        return [
            self._format_message(
                m, project, viewer_id,
                attachments.get(m["id"], []),
                recipients.get(m["id"], {}).get(viewer_id),
                alias_map,
            )
            for m in messages
        ]

    def mark_read(self, message_id: str, user_id: str) -> MarkReadResponse:
        """Stamp read_at on the caller's receipt; an existing read_at is kept"""
        try:
            result = self.supabase.table("message_recipients")\
                .select("*")\
                .eq("message_id", message_id)\
                .eq("recipient_id", user_id)\
                .maybe_single()\
                .execute()
            if not result or not result.data:
                raise HTTPException(status_code=404, detail="Message not found")
            receipt = result.data
            if receipt.get("read_at"):
                return MarkReadResponse(message_id=message_id, read_at=receipt["read_at"])

            read_at = datetime.now(timezone.utc).isoformat()
            self.supabase.table("message_recipients")\
                .update({"read_at": read_at})\
                .eq("message_id", message_id)\
                .eq("recipient_id", user_id)\
                .execute()
            return MarkReadResponse(message_id=message_id, read_at=read_at)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to mark message as read: {str(e)}")

    def unread_count(self, user_id: str, project_id: Optional[str] = None) -> int:
        try:
            result = self.supabase.table("message_recipients")\
                .select("message_id")\
                .eq("recipient_id", user_id)\
                .is_("read_at", "null")\
                .execute()
            unread = {row["message_id"] for row in (result.data or [])}
            if project_id and unread:
                project_messages = self.supabase.table("messages")\
                    .select("id")\
                    .eq("project_id", project_id)\
                    .execute()
                unread &= {m["id"] for m in (project_messages.data or [])}
            return len(unread)
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to count unread messages: {str(e)}")
