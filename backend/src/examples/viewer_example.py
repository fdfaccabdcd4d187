import asyncio
import json
import websockets

async def main():
    uri = "ws://localhost:8000/ws"
    async with websockets.connect(uri) as ws:
        await ws.send(json.dumps({"type": "join", "display_name": "bob"}))
        await ws.send(json.dumps({"type": "join_group", "name": "Hiking"}))
        print("Awaiting events... (press Ctrl+C to exit)")
        while True:
            event = json.loads(await ws.recv())
            print("Received:", event)
            # comment on every new photo we see
            if event["type"] == "new_content":
                await ws.send(json.dumps({"type": "add_comment", "content_id": event["item"]["id"], "text": "nice"}))

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("Disconnected.")
