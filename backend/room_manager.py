import asyncio
import json
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional, Set

from config import Settings, settings as default_settings
from phrases import PhraseSynthesizer
from sessions import DictationSession, PatientSession


@dataclass
class Room:
    creator: str
    patient: PatientSession
    dictation: DictationSession
    participants: Set[str] = field(default_factory=set)
    created_at: float = field(default_factory=time.time)


class RoomManager:
    def __init__(self, synthesizer: PhraseSynthesizer = None, config: Settings = None):
        self.config = config or default_settings
        self.synthesizer = synthesizer or PhraseSynthesizer()
        self.rooms: Dict[str, Room] = {}
        self.room_websockets: Dict[str, Set] = {}

    def create_room(self, user_id: str) -> str:
        room_code = str(uuid.uuid4())[:8]

        async def broadcast(message: dict):
            self.broadcast_to_room(room_code, json.dumps(message))

        self.rooms[room_code] = Room(
            creator=user_id,
            participants={user_id},
            patient=PatientSession(self.synthesizer, self.config),
            dictation=DictationSession(self.config, on_event=broadcast),
        )
        self.room_websockets[room_code] = set()
        print(f"✅ Room created: {room_code} by {user_id}")
        return room_code

    def join_room(self, room_code: str, user_id: str) -> bool:
        if room_code in self.rooms:
            self.rooms[room_code].participants.add(user_id)
            print(f"👥 {user_id} joined room {room_code}")
            return True
        print(f"❌ Room not found: {room_code}")
        return False

    def room_exists(self, room_code: str) -> bool:
        return room_code in self.rooms

    def get_room(self, room_code: str) -> Optional[Room]:
        return self.rooms.get(room_code)

    def leave_room(self, room_code: str, user_id: str):
        room = self.rooms.get(room_code)
        if room is None:
            return
        room.participants.discard(user_id)
        if user_id == room.creator or not room.participants:
            self.delete_room(room_code)

    def delete_room(self, room_code: str):
        room = self.rooms.pop(room_code, None)
        if room is not None:
            room.dictation.cancel()
            print(f"🗑️ Room deleted: {room_code}")
        self.room_websockets.pop(room_code, None)

    def get_transcript(self, room_code: str) -> list:
        room = self.rooms.get(room_code)
        if room is None:
            return []
        return list(room.dictation.segmenter.transcript())

    def add_websocket(self, room_code: str, websocket):
        if room_code not in self.room_websockets:
            self.room_websockets[room_code] = set()
        self.room_websockets[room_code].add(websocket)

    def remove_websocket(self, room_code: str, websocket):
        if room_code in self.room_websockets:
            self.room_websockets[room_code].discard(websocket)

    def broadcast_to_room(self, room_code: str, message: str):
        for websocket in list(self.room_websockets.get(room_code, ())):
            asyncio.create_task(websocket.send_text(message))


room_manager = RoomManager()
