"""
Catalog HTTP endpoints.

Every route hands its work to a request pipeline; handlers only run once all
of the route's interceptors have let the request through.
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from ..models import LoginResponse, Rejected, RejectionKind, RequestContext
from .deps import CredentialIssuerDep, PipelinesDep, ProductStoreDep, RequestContextDep

GREETING = "Welcome to my API!"

router = APIRouter()


def _not_found() -> JSONResponse:
    return Rejected(RejectionKind.NOT_FOUND).to_response()


@router.get("/")
async def read_root(context: RequestContextDep, pipelines: PipelinesDep):
    async def handler(ctx: RequestContext) -> Response:
        return PlainTextResponse(GREETING)

    return await pipelines.public.run(context, handler)


@router.get("/api/products")
async def list_products(
    context: RequestContextDep, pipelines: PipelinesDep, store: ProductStoreDep
):
    async def handler(ctx: RequestContext) -> Response:
        products = await store.list()
        return JSONResponse([p.model_dump() for p in products])

    return await pipelines.public.run(context, handler)


# Declared before /api/products/{product_id} so "secure" is not taken as an id.
@router.get("/api/products/secure")
async def list_secure_products(
    context: RequestContextDep, pipelines: PipelinesDep, store: ProductStoreDep
):
    """Same listing as /api/products, for authenticated callers only."""

    async def handler(ctx: RequestContext) -> Response:
        products = await store.list()
        return JSONResponse([p.model_dump() for p in products])

    return await pipelines.secure.run(context, handler)


@router.get("/api/products/{product_id}")
async def get_product(
    product_id: str,
    context: RequestContextDep,
    pipelines: PipelinesDep,
    store: ProductStoreDep,
):
    async def handler(ctx: RequestContext) -> Response:
        try:
            pid = int(product_id)
        except ValueError:
            return _not_found()

        product = await store.get(pid)
        if product is None:
            return _not_found()
        return JSONResponse(product.model_dump())

    return await pipelines.public.run(context, handler)


@router.post("/api/products")
async def create_product(
    context: RequestContextDep, pipelines: PipelinesDep, store: ProductStoreDep
):
    async def handler(ctx: RequestContext) -> Response:
        product = await store.create(ctx.get("fields"))
        return JSONResponse(status_code=status.HTTP_201_CREATED, content=product.model_dump())

    return await pipelines.create.run(context, handler)


@router.post("/api/login")
async def login(context: RequestContextDep, pipelines: PipelinesDep, issuer: CredentialIssuerDep):
    """Exchange a username/password pair for a session token."""

    async def handler(ctx: RequestContext) -> Response:
        body = ctx.body or {}
        result = await issuer.issue(body.get("username"), body.get("password"))
        if isinstance(result, Rejected):
            return result.to_response()
        return JSONResponse(LoginResponse(token=result.token).model_dump())

    return await pipelines.public.run(context, handler)


async def preflight(context: RequestContextDep, pipelines: PipelinesDep):
    """CORS preflight. The origin stage decides the headers; the answer is an empty 204."""

    async def handler(ctx: RequestContext) -> Response:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return await pipelines.preflight_for(context.path).run(context, handler)


# Only paths with a route answer OPTIONS; anything else stays a 404.
# The secure listing comes before the {product_id} template here too.
PREFLIGHT_PATHS = (
    "/",
    "/api/products",
    "/api/products/secure",
    "/api/products/{product_id}",
    "/api/login",
)

for _path in PREFLIGHT_PATHS:
    router.add_api_route(_path, preflight, methods=["OPTIONS"])
