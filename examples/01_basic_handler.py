"""
Basic usage example of fastapi-route-handler.

Demonstrates:
- Describing a route site (render, parse, attributes)
- Writing handler steps that build a response imperatively
- Falling through to regular FastAPI routes when no step answers
"""

from dataclasses import dataclass

from fastapi import FastAPI

from fastapi_route_handler import Env, Handler, HandlerContext, HandlerMiddleware


@dataclass(frozen=True)
class NoteRoute:
    note_id: int


class NoteSite:
    """Routes of the form /notes/<id>."""

    def render_route(self, route: NoteRoute) -> str:
        return f"/notes/{route.note_id}"

    def parse_route(self, path: str) -> NoteRoute | None:
        prefix, _, rest = path.strip("/").partition("/")
        if prefix == "notes" and rest.isdigit():
            return NoteRoute(int(rest))
        return None

    def route_attrs(self, route: NoteRoute) -> frozenset[str]:
        return frozenset({"notes", "public"})


NOTES = {1: "Buy milk", 2: "Write tests"}


async def cors(h: HandlerContext) -> None:
    h.header("Access-Control-Allow-Origin", "*")


async def show_note(h: HandlerContext) -> None:
    route = h.maybe_route()
    if route is None:
        # Not ours: the FastAPI app below answers
        return
    note = NOTES.get(route.note_id)
    if note is None:
        h.status(404)
        h.json({"detail": "No such note"})
        return
    h.json({"id": route.note_id, "text": note, "self": h.show_route_sub()(route)})


app = FastAPI(title="Basic Handler Example")


@app.get("/")
async def index():
    """Regular FastAPI endpoint reached through the next application."""
    return {"message": "Try /notes/1"}


app.add_middleware(
    HandlerMiddleware,
    handler=Handler(cors, show_note),
    env=Env.root(master=NOTES, routes=NoteSite()),
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Test with:
    # curl http://localhost:8000/notes/1
    # curl http://localhost:8000/notes/9
    # curl http://localhost:8000/
