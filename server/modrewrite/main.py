from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from modrewrite.routers import files, transform

app = FastAPI(
    title="modrewrite",
    description="Rewrites ES module declarations into require()/module.exports form.",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins for local development
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include Routers
app.include_router(transform.router)
app.include_router(files.router)

@app.get("/api-status")
async def root():
    return {"message": "modrewrite is running. Visit /docs for API documentation."}
