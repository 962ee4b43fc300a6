import html
import logging

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

from getset.errors import CommandError, StorePersistError

logger = logging.getLogger("HTTP")

HOME_BODY = (
    "        <ul>\n"
    "            <li><a href='/manual.html'>Manual test</a></li>\n"
    "            <li><a href='/auto.html'>Auto test</a></li>\n"
    "            <li><a href='/command'>Command URL (GET gives <code>400 Bad request</code>)</a></li>\n"
    "        </ul>"
)


def build_html(title: str, body: str) -> str:
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "    <head>\n"
        f"        <title>GetSet - {title}</title>\n"
        "        <meta charset='utf-8' />\n"
        "    </head>\n"
        "    <body>\n"
        f"        <h1>{title}</h1>\n{body}\n"
        "    </body>\n"
        "</html>\n"
    )


def error_page(status_code: int, title: str, msg: str) -> HTMLResponse:
    # msg may echo client input
    body = f"        <span style='color:red'>{html.escape(msg)}</span>"
    return HTMLResponse(build_html(title, body), status_code=status_code)


def mount_command_api(app: FastAPI, service):
    router = APIRouter()

    @app.exception_handler(CommandError)
    async def command_error(request: Request, exc: CommandError):
        logger.info(f"{request.method} {request.url.path}: {exc.message}")
        return error_page(400, "400 Bad Request", exc.message)

    @app.exception_handler(StorePersistError)
    async def persist_error(request: Request, exc: StorePersistError):
        logger.error(str(exc))
        return error_page(500, "500 Internal Server Error", str(exc))

    @router.get("/", response_class=HTMLResponse)
    async def home():
        return build_html("Home", HOME_BODY)

    @router.get("/command")
    async def command_get():
        service.handle_get()

    @router.post("/command", response_class=PlainTextResponse)
    async def command_post(request: Request):
        # form body first, query string as a fallback
        params = dict(request.query_params)
        form = await request.form()
        params.update((k, v) for k, v in form.items() if isinstance(v, str))
        result = await service.handle_post(params)
        return result.render()

    app.include_router(router)
