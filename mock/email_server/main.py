from fastapi import FastAPI, HTTPException
import os

app = FastAPI(title="Mock Email Service", version="1.0.0")
# Set MOCK_EMAIL_FAIL=1 to simulate a provider outage
FAIL = os.environ.get("MOCK_EMAIL_FAIL") == "1"
OUTBOX = []

@app.get("/health")
def health(): return {"status": "ok"}

@app.post("/mock-email/send")
def send(message: dict):
    if FAIL:
        raise HTTPException(status_code=503, detail="provider unavailable")
    if not message.get("to"):
        raise HTTPException(status_code=422, detail="recipient required")
    OUTBOX.append(message)
    return {"status": "queued", "id": len(OUTBOX)}

@app.get("/mock-email/outbox")
def outbox(): return {"messages": OUTBOX}
