import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from jinja2 import Environment, FileSystemLoader, select_autoescape
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__, config
from .api.routes_job import router as job_router
from .api.routes_resume import router as resume_router
from .storage import build_storage

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Resume Tailor", version=__version__)

origins = config.CORS_ORIGINS
if not origins:
    # Sensible default for local dev
    origins = ["http://localhost:5173", "http://localhost:3000", "http://localhost:8000"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

package_dir = os.path.dirname(os.path.abspath(__file__))
app.mount("/static", StaticFiles(directory=os.path.join(package_dir, "static")), name="static")

# One storage for the process; handlers reach it through storage.get_storage
app.state.storage = build_storage(config.DATABASE_URL)

# Jinja2 environment for the UI page
env = Environment(
    loader=FileSystemLoader(os.path.join(package_dir, "templates")),
    autoescape=select_autoescape(["html"]),
)


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"message": exc.detail}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_error(request: Request, exc: RequestValidationError):
    return JSONResponse({"message": "Invalid request body"}, status_code=400)


@app.get("/health")
def health():
    return {"ok": True}


@app.get("/", response_class=HTMLResponse)
def index():
    tpl = env.get_template("index.html")
    return tpl.render(max_upload_mb=config.MAX_UPLOAD_BYTES // (1024 * 1024), version=__version__)


app.include_router(resume_router)
app.include_router(job_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
