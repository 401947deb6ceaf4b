from fastapi import FastAPI
from qatree.core import config
from qatree.services.qa_tree_service import QaTreeService
from qatree.routers import qa

config.configure_logging()

app = FastAPI(title="qatree")

# Services
qa_tree_service = QaTreeService()

# App State
app.state.qa_tree_service = qa_tree_service

# Include Routers
app.include_router(qa.router, prefix=config.API_PREFIX)

@app.get("/health", include_in_schema=False)
async def health():
    return {"status": "ok"}

if __name__ == "__main__":
    import uvicorn
    import argparse

    parser = argparse.ArgumentParser(description="Run the questionnaire tree service")
    parser.add_argument("--port", type=int, default=8000, help="Port to run the service on")
    parser.add_argument("--host", type=str, default="0.0.0.0", help="Host to bind to")
    args = parser.parse_args()

    uvicorn.run(app, host=args.host, port=args.port)
