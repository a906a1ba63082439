from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from use_client_lint.routers import lint

app = FastAPI(
    title="use-client lint server",
    description="Checks React Server Component modules for a correct 'use client' directive.",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Editors and local tools call this from anywhere
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(lint.router)


@app.get("/api-status")
async def root():
    return {"message": "use-client lint server is running. Visit /docs for API documentation."}
