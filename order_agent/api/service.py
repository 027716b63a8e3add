"""对外 HTTP 服务模块。

单一业务端点 POST /api/query：把用户消息交给查询链路，
返回原始操作结果和自然语言回复。
"""

from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from order_agent.config.settings import settings
from order_agent.domain.exceptions import BusinessError, MissingArgument, UnsupportedOperation
from order_agent.flows import runner
from order_agent.infrastructure.logging.logger import logger


class QueryRequest(BaseModel):
    message: str = Field(..., description="用户输入的自然语言问题")
    session_id: Optional[str] = Field(default=None, description="意图抽取会话 id（可选）")


def create_app() -> FastAPI:
    app = FastAPI(title="Order Agent")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_origin],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        allow_credentials=True,
    )

    @app.exception_handler(BusinessError)
    async def business_error_handler(request: Request, exc: BusinessError) -> JSONResponse:
        if isinstance(exc, (MissingArgument, UnsupportedOperation)):
            return JSONResponse(status_code=exc.http_status, content={"error": exc.message})
        logger.error(
            f"Request failed: {exc.message}",
            extra={"extra": {"path": request.url.path, "code": exc.code}},
        )
        return JSONResponse(
            status_code=exc.http_status,
            content={"error": exc.message, "code": exc.code},
        )

    @app.get("/api/health")
    def health() -> dict:
        return {"status": "ok", "orders": len(runner.get_order_store())}

    @app.post("/api/query")
    def query(body: QueryRequest) -> dict:
        logger.info("api.query", extra={"extra": {"user_input": body.message, "session_id": body.session_id}})
        outcome = runner.run_query(body.message, session_id=body.session_id)
        return outcome.to_dict()

    return app


app = create_app()


def main() -> None:
    """Run the API server with uvicorn."""

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
