import io
import logging
from typing import List, Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from ..core.aggregator import Aggregator, sort_rows
from ..core.errors import DecodeError, ResponseLogError
from ..core.ingestor import LogIngestor
from ..core.report import rows_to_dicts
from ..utils.config import Config
from .middleware import JSONLogger, ResponseLoggerMiddleware, skip_paths

logger = logging.getLogger(__name__)


class SummaryRowModel(BaseModel):
    url: str
    method: str
    pattern: str
    count: int
    sum: int
    avg: float
    min: int
    max: int


class SummaryResponse(BaseModel):
    filename: Optional[str] = None
    records: int
    skipped: int
    rows: List[SummaryRowModel]


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Create the demo service wrapped in the response logger

    Args:
        config: Configuration, defaults plus environment if not given

    Returns:
        FastAPI application
    """
    config = config or Config()
    app = FastAPI(title="responselog")

    app.add_middleware(
        ResponseLoggerMiddleware,
        response_logger=JSONLogger(
            headers=config.get_list("middleware.headers", []),
            source_tag=config.get("parsing.source_tag"),
        ),
        skip=skip_paths(config.get_list("middleware.skip_paths", [])),
    )

    @app.get("/", response_class=PlainTextResponse)
    async def index():
        return "Hello world!"

    @app.get("/other")
    async def other():
        raise HTTPException(status_code=404, detail="Not Found")

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.post("/summarize", response_model=SummaryResponse)
    async def summarize(
        file: UploadFile = File(...),
        sort: Optional[str] = Form(None),
    ):
        """Summarize an uploaded response log"""
        content = await file.read()
        logger.info(f"Summarizing upload {file.filename} ({len(content)} bytes)")

        try:
            result = LogIngestor(config=config).ingest(io.BytesIO(content))
        except DecodeError as e:
            raise HTTPException(
                status_code=422,
                detail=f"{file.filename}: line {e.line_number}: {e.reason}",
            )
        except ResponseLogError as e:
            raise HTTPException(status_code=400, detail=str(e))

        rows = Aggregator(default_method=config.get("aggregation.default_method")).aggregate(
            result.records
        )
        if sort:
            try:
                rows = sort_rows(rows, sort)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        return SummaryResponse(
            filename=file.filename,
            records=len(result.records),
            skipped=result.skipped_lines,
            rows=[SummaryRowModel(**row) for row in rows_to_dicts(rows)],
        )

    return app


def start(host: str = "0.0.0.0", port: int = 8000, config: Optional[Config] = None) -> None:
    """Run the demo service with uvicorn"""
    import uvicorn

    uvicorn.run(create_app(config), host=host, port=port)


if __name__ == "__main__":
    start()
