from __future__ import annotations

import contextlib
import json

from quart import make_response, request
from quart.typing import ResponseTypes
from quart_trio import QuartTrio

hypercorn_app = QuartTrio(__name__)

ECHO_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"]


@hypercorn_app.route("/")
async def index() -> ResponseTypes:
    return await make_response("Dummy server!")


@hypercorn_app.route("/successful")
async def successful() -> ResponseTypes:
    return await make_response("Successful", 200)


@hypercorn_app.route("/failed")
async def failed() -> ResponseTypes:
    return await make_response("Failed", 422)


@hypercorn_app.route("/errored")
async def errored() -> ResponseTypes:
    return await make_response("Error", 500)


@hypercorn_app.route("/status")
async def status() -> ResponseTypes:
    "Answer with the status code given as ``code``"
    code = int(request.args.get("code", "200"))
    return await make_response(f"Status {code}", code)


@hypercorn_app.route("/set-headers")
async def set_headers() -> ResponseTypes:
    "Echo back the request headers as JSON"
    return await make_response(
        json.dumps(dict(request.headers.items())),
        200,
        [("Content-Type", "application/json")],
    )


@hypercorn_app.route("/response-header")
async def response_header() -> ResponseTypes:
    headers = [("X-Diplomatic-Response-Header", "ThisIsADiplomaticTest")]
    return await make_response("Headers sent", 200, headers)


@hypercorn_app.route("/json-message")
async def json_message() -> ResponseTypes:
    "A well-formed JSON document reporting an application level failure"
    body = json.dumps({"Message": "No symbol matches found"})
    return await make_response(body, 200, [("Content-Type", "application/json")])


@hypercorn_app.route("/latin-1")
async def latin_1() -> ResponseTypes:
    return await make_response(
        "caf\xe9".encode("latin-1"),
        200,
        [("Content-Type", "text/plain; charset=ISO-8859-1")],
    )


@hypercorn_app.route("/echo-data", methods=ECHO_METHODS)
async def echo_data() -> ResponseTypes:
    "Echo back the method, query string and form data as JSON"
    form = await request.form
    body = {
        "method": request.method,
        "query": request.args.to_dict(),
        "form": form.to_dict(),
        "content_type": request.headers.get("Content-Type", ""),
    }
    return await make_response(
        json.dumps(body), 200, [("Content-Type", "application/json")]
    )


@hypercorn_app.route("/file-upload", methods=["POST", "PUT", "PATCH"])
async def file_upload() -> ResponseTypes:
    "Describe the uploaded files and form fields as JSON"
    form = await request.form
    files = {}
    for name, file_ in (await request.files).items():
        # data is short enough to read synchronously without blocking the event loop
        with contextlib.closing(file_.stream) as stream:
            data = stream.read()
        files[name] = {
            "filename": file_.filename,
            "content_type": file_.content_type,
            "content": data.decode("utf-8", "replace"),
        }

    body = {"form": form.to_dict(), "files": files}
    return await make_response(
        json.dumps(body), 200, [("Content-Type", "application/json")]
    )
