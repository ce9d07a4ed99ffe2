# rxguard/main.py
#
# This is the main entry point for the FastAPI application.
# It creates the FastAPI app instance and includes the scan router.
#
# The `handler` function is the entry point for AWS Lambda.

from fastapi import FastAPI
from mangum import Mangum

from .routers import scan

app = FastAPI(
    title="Prescription QR Authorization API",
    description="Verifies scanned prescription QR codes against appointment ownership and returns medications."
)

app.include_router(scan.router)

@app.get("/health", tags=["Health Check"])
def health_check():
    """A simple endpoint to confirm the API is running."""
    return {"status": "ok"}

# This handler is the entry point for AWS Lambda
handler = Mangum(app, lifespan="off")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
