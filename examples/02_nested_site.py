"""
Nested site example.

Demonstrates:
- Mounting a sub site inside a master site with a route translation
- Rendering master links from a sub site handler
- Reading and decoding the request body once
- Debug traces and lifecycle hooks
"""

import logging
from dataclasses import dataclass

from pydantic import BaseModel
from starlette.applications import Starlette
from starlette.requests import Request

from fastapi_route_handler import (
    AfterHandler,
    Env,
    Finalized,
    Handler,
    HandlerContext,
    HandlerMiddleware,
)

logging.basicConfig(level=logging.DEBUG)


@dataclass(frozen=True)
class ShopRoute:
    name: str


@dataclass(frozen=True)
class SiteRoute:
    section: str
    shop: ShopRoute | None = None


class ShopSite:
    def render_route(self, route: ShopRoute) -> str:
        return "/" + route.name

    def parse_route(self, path: str) -> ShopRoute | None:
        name = path.strip("/")
        return ShopRoute(name) if name in {"cart", "orders"} else None

    def route_attrs(self, route: ShopRoute) -> frozenset[str]:
        return frozenset({"auth"}) if route.name == "orders" else frozenset()


class MainSite:
    def render_route(self, route: SiteRoute) -> str:
        if route.shop is not None:
            return "/shop" + ShopSite().render_route(route.shop)
        return "/" + route.section

    def parse_route(self, path: str) -> SiteRoute | None:
        if path.startswith("/shop/"):
            shop = ShopSite().parse_route(path[len("/shop") :])
            return None if shop is None else SiteRoute("shop", shop)
        return None

    def route_attrs(self, route: SiteRoute) -> frozenset[str]:
        return frozenset({"shop"}) if route.shop is not None else frozenset()


class Order(BaseModel):
    sku: str
    quantity: int = 1


async def require_auth(h: HandlerContext) -> None:
    if "auth" in h.route_attrs() and h.req_header("Authorization") is None:
        h.status(401)
        h.plain("Login required")


async def place_order(h: HandlerContext) -> None:
    route = h.maybe_route()
    if route is None or h.request.method != "POST":
        return
    result = await h.json_body(Order)
    if not result:
        h.status(422)
        h.json({"detail": result.error.detail, "errors": result.error.errors})
        return
    h.status(201)
    h.header("Location", h.show_route_query_sub()(route, [("sku", result.value.sku)]))
    h.json(result.value)


async def report(h: HandlerContext, resolution: Finalized | None) -> None:
    trace = h.state["trace"]
    logging.getLogger(__name__).info(
        "%s resolved to %r by %s",
        h.request.url.path,
        resolution,
        trace.finalized_by,
    )


def match_shop(request: Request) -> ShopRoute | None:
    path = request.url.path
    if not path.startswith("/shop/"):
        return None
    return ShopSite().parse_route(path[len("/shop") :])


env = Env(
    master={"name": "main"},
    sub={"name": "shop"},
    master_routes=MainSite(),
    sub_routes=ShopSite(),
    to_master=lambda route: SiteRoute("shop", route),
)

handler = Handler(require_auth, place_order, debug=True).add_hook(
    AfterHandler(report)
)

app = Starlette()
app.add_middleware(HandlerMiddleware, handler=handler, env=env, match=match_shop)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Test with:
    # curl -X POST -H "Authorization: x" -d '{"sku": "A1"}' http://localhost:8000/shop/orders
    # curl -X POST -d '{"sku": "A1"}' http://localhost:8000/shop/orders
