import json
import time
from typing import List

import uvicorn
from fastapi import Body, FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError

from config import settings
from gestures import ClassificationEvent, event_from_scores
from phrases import InvalidInput, PhraseSynthesizer
from room_manager import room_manager
from speech import TranscriptFragment

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

synthesizer = PhraseSynthesizer()


class GenerateRequest(BaseModel):
    words: List[str] = Field(default_factory=list)


class ClassificationMessage(BaseModel):
    label: str
    confidence: float = Field(ge=0.0, le=1.0)


class PredictionMessage(BaseModel):
    classes: List[str]
    probabilities: List[float]


class FragmentMessage(BaseModel):
    text: str
    isFinal: bool = False


@app.get("/")
async def read_root():
    return {"message": "SignBridge Care Backend API"}


@app.post("/generate")
async def generate(request: GenerateRequest):
    try:
        sentence = synthesizer.synthesize(request.words)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    print(f"✅ Output for {request.words}: {sentence}")
    return {"sentence": sentence}


@app.post("/create-room/{user_id}")
async def create_room(user_id: str):
    room_code = room_manager.create_room(user_id)
    return {"room_code": room_code}


@app.post("/join-room/{room_code}")
async def join_room(room_code: str, data: dict = Body(...)):
    user_id = data.get("user_id")
    if not user_id:
        raise HTTPException(status_code=400, detail="Missing user_id")
    if not room_manager.join_room(room_code, user_id):
        raise HTTPException(status_code=404, detail="Room not found")
    return {"message": f"{user_id} joined room {room_code}"}


@app.get("/transcript/{room_code}")
async def get_transcript(room_code: str):
    if not room_manager.room_exists(room_code):
        raise HTTPException(status_code=404, detail="Room not found")
    return {"transcript": room_manager.get_transcript(room_code)}


@app.get("/words/{room_code}")
async def get_words(room_code: str):
    room = room_manager.get_room(room_code)
    if room is None:
        raise HTTPException(status_code=404, detail="Room not found")
    return {"words": list(room.patient.words)}


async def handle_message(room_code: str, data_json: dict, websocket: WebSocket):
    if not isinstance(data_json, dict):
        raise ValueError("Message must be a JSON object")
    room = room_manager.get_room(room_code)
    if room is None:
        await websocket.send_text(json.dumps({"type": "error", "detail": "Room not found"}))
        return

    message_type = data_json.get("type")
    patient = room.patient
    dictation = room.dictation

    if message_type in ("classification", "prediction"):
        if message_type == "classification":
            msg = ClassificationMessage(**data_json)
            event = ClassificationEvent(msg.label, msg.confidence, time.time())
        else:
            msg = PredictionMessage(**data_json)
            event = event_from_scores(msg.classes, msg.probabilities, time.time())

        if patient.observe(event) is not None:
            room_manager.broadcast_to_room(room_code, json.dumps({
                "type": "words_update",
                "words": list(patient.words)
            }))

    elif message_type == "generate":
        sentence = patient.generate()
        room_manager.broadcast_to_room(room_code, json.dumps({
            "type": "sentence",
            "source": "patient",
            "text": sentence
        }))
        room_manager.broadcast_to_room(room_code, json.dumps({"type": "words_update", "words": []}))

    elif message_type == "reset_words":
        patient.reset_words()
        room_manager.broadcast_to_room(room_code, json.dumps({"type": "words_update", "words": []}))

    elif message_type == "transcript":
        msg = FragmentMessage(**data_json)
        await dictation.submit_fragment(TranscriptFragment(msg.text, msg.isFinal))

    elif message_type == "dictation_restart":
        await dictation.submit_restart()

    elif message_type == "dictation_end":
        await dictation.submit_end(user_stopped=bool(data_json.get("userStopped", True)))

    elif message_type == "clear_transcript":
        await dictation.submit_clear()

    else:
        raise ValueError(f"Unknown message type: {message_type}")


@app.websocket("/ws/{room_code}/{user_id}")
async def websocket_endpoint(websocket: WebSocket, room_code: str, user_id: str):
    await websocket.accept()
    room_manager.add_websocket(room_code, websocket)

    try:
        while True:
            data = await websocket.receive_text()
            try:
                data_json = json.loads(data)
                await handle_message(room_code, data_json, websocket)
            except (ValueError, ValidationError) as e:
                # InvalidInput and json decode errors are ValueErrors too
                print(f"⚠️ Bad message in room {room_code}: {e}")
                await websocket.send_text(json.dumps({"type": "error", "detail": str(e)}))

    except WebSocketDisconnect:
        room_manager.remove_websocket(room_code, websocket)
        room_manager.leave_room(room_code, user_id)


if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port)
