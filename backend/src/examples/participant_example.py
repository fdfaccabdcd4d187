import asyncio
import json
import uuid
import websockets  # lightweight client; to install: pip install websockets

async def main():
    uri = "ws://localhost:8000/ws"
    async with websockets.connect(uri) as ws:
        # join, open a group and share a photo reference with it
        events = [
            {"type": "join", "display_name": "alice"},
            {"type": "create_group", "name": "Hiking"},
            {"type": "publish_content", "scope": "Hiking", "caption": "Summit!", "asset_ref": "/uploads/summit.jpg"},
        ]
        for ev in events:
            ev["request_id"] = str(uuid.uuid4())
            print("Client Message: ", ev)
            await ws.send(json.dumps(ev))
        # print whatever the server pushes for a few seconds
        try:
            while True:
                print("Server:", await asyncio.wait_for(ws.recv(), timeout=3))
        except asyncio.TimeoutError:
            pass

if __name__ == "__main__":
    asyncio.run(main())
