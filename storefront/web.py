"""JSON HTTP API for the storefront and its admin back-office."""

from __future__ import annotations

import logging
import secrets
from typing import Any, Dict, List, Optional, Union

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.collections import fetch_collection_products
from storefront.catalog.sync import sync_catalog
from storefront.config import settings
from storefront.content.forms import clean_content_update
from storefront.content.merge import merge_content
from storefront.content.store import collection_by_handle, content_store
from storefront.db.models import Order, OrderItem, Product
from storefront.db.session import get_session
from storefront.errors import NotFoundError, StorefrontError
from storefront.repo import admins as admins_repo
from storefront.repo import orders as orders_repo
from storefront.repo import products as products_repo
from storefront.repo.products import ProductInput
from storefront.services import cart as cart_service
from storefront.services.checkout import create_order
from storefront.services.uploads import read_upload_body, save_upload
from storefront.utils.money import format_money

admin_log = logging.getLogger("admin")

app = FastAPI(title="ProMonitor Storefront")
app.mount(
    "/uploads",
    StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
    name="uploads",
)

COLLECTION_FALLBACK_MESSAGE = "Vi klarte ikke å hente denne kolleksjonen akkurat nå. Vi viser alle produkter."


@app.exception_handler(StorefrontError)
async def _storefront_error(_: Request, exc: StorefrontError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"ok": False, "error": exc.message})


def _require_token(request: Request) -> None:
    token = settings.ADMIN_TOKEN
    if not token:
        raise HTTPException(status_code=503, detail="Admin token is not configured")

    provided: str | None = None
    header = request.headers.get("Authorization")
    if header:
        scheme, _, value = header.partition(" ")
        provided = value.strip() if scheme.lower() == "bearer" else header.strip()
    if provided is None:
        provided = request.query_params.get("token")

    if provided is None or not secrets.compare_digest(provided, token):
        raise HTTPException(status_code=401, detail="Unauthorized")


def _product_dict(product: Product) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "slug": product.slug,
        "description": product.description,
        "price_cents": product.price_cents,
        "price": format_money(product.price_cents),
        "image_path": product.image_path,
        "is_featured": bool(product.is_featured),
        "source": product.source,
        "sort_order": product.sort_order,
    }


def _order_dict(order: Order, items: List[OrderItem] | None = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": order.id,
        "name": order.name,
        "email": order.email,
        "address": order.address,
        "total_cents": order.total_cents,
        "total": format_money(order.total_cents),
        "created_at": order.created_at.isoformat() if order.created_at else None,
    }
    if items is not None:
        payload["items"] = [
            {
                "product_id": item.product_id,
                "name": item.name,
                "price_cents": item.price_cents,
                "qty": item.qty,
                "line_total_cents": item.line_total_cents,
            }
            for item in items
        ]
    return payload


def _cart_token(request: Request, response: Response) -> str:
    token = request.cookies.get(settings.CART_COOKIE_NAME)
    if not token:
        token = secrets.token_urlsafe(16)
        response.set_cookie(settings.CART_COOKIE_NAME, token, httponly=True, samesite="lax")
    return token


class CartAdd(BaseModel):
    product_id: int
    qty: int = 1


class CartUpdate(BaseModel):
    quantities: Dict[str, int] = Field(default_factory=dict)


class CartRemove(BaseModel):
    product_id: int


class CheckoutRequest(BaseModel):
    name: str = ""
    email: str = ""
    address: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class ProductPayload(BaseModel):
    name: str = ""
    description: str = ""
    price: Optional[Union[str, float, int]] = None
    is_featured: bool = False
    image_url: str = ""
    gallery: List[str] = Field(default_factory=list, description="Already uploaded /uploads paths")


class ReorderRequest(BaseModel):
    order: str = Field("", description="Comma separated product ids, e.g. 2,3,1")


# Public storefront


@app.get("/api/content")
async def public_content() -> Dict[str, Any]:
    return {"ok": True, "content": await content_store.get()}


@app.get("/api/shop")
async def shop(session: AsyncSession = Depends(get_session)) -> Dict[str, Any]:
    content = await content_store.get()
    offers = await products_repo.list_products(session, products_repo.SCOPE_OFFERS)
    return {"ok": True, "content": content.get("shop"), "offers": [_product_dict(p) for p in offers]}


@app.get("/api/products")
async def products(session: AsyncSession = Depends(get_session)) -> Dict[str, Any]:
    items = await products_repo.list_products(session, products_repo.SCOPE_PUBLIC)
    return {"ok": True, "products": [_product_dict(p) for p in items]}


@app.get("/api/products/{slug}")
async def product_detail(slug: str, session: AsyncSession = Depends(get_session)) -> Dict[str, Any]:
    product = await products_repo.get_by_slug(session, slug)
    if product is None:
        raise NotFoundError("Produktet finnes ikke.")
    payload = _product_dict(product)
    payload["images"] = await products_repo.product_gallery(session, product)
    return {"ok": True, "product": payload}


@app.get("/api/collections")
async def collections() -> Dict[str, Any]:
    content = await content_store.get()
    return {"ok": True, "collections": content["collections"]}


@app.get("/api/collections/{handle}")
async def collection_detail(handle: str, session: AsyncSession = Depends(get_session)) -> Dict[str, Any]:
    content = await content_store.get()
    collection = collection_by_handle(content, handle) or {}
    header = {
        "title": collection.get("title") or "Kolleksjon",
        "subtitle": collection.get("subtitle") or "Skjermutvidelse",
        "lead": collection.get("lead") or "Utvalgte produkter fra ProMonitor.",
    }

    result = await fetch_collection_products(handle)
    error = None
    if result.ok:
        items = result.products
    else:
        if not result.disabled:
            error = COLLECTION_FALLBACK_MESSAGE
        items = [_product_dict(p) for p in await products_repo.list_products(session)]
    return {"ok": True, "collection": header, "products": items, "error": error}


@app.get("/api/cart")
async def cart_view(request: Request, response: Response) -> Dict[str, Any]:
    cart = cart_service.get_cart(_cart_token(request, response))
    return {"ok": True, "cart": cart.to_payload()}


@app.post("/api/cart/add")
async def cart_add(
    payload: CartAdd,
    request: Request,
    response: Response,
    session: AsyncSession = Depends(get_session),
) -> Dict[str, Any]:
    product = await products_repo.get_public(session, payload.product_id)
    if product is None:
        raise NotFoundError("Produktet finnes ikke.")
    token = _cart_token(request, response)
    cart = cart_service.get_cart(token)
    cart.add(product, payload.qty)
    cart_service.save_cart(token, cart)
    return {"ok": True, "cart": cart.to_payload()}


@app.post("/api/cart/update")
async def cart_update(payload: CartUpdate, request: Request, response: Response) -> Dict[str, Any]:
    token = _cart_token(request, response)
    cart = cart_service.get_cart(token)
    cart.update_quantities(payload.quantities)
    cart_service.save_cart(token, cart)
    return {"ok": True, "cart": cart.to_payload()}


@app.post("/api/cart/remove")
async def cart_remove(payload: CartRemove, request: Request, response: Response) -> Dict[str, Any]:
    token = _cart_token(request, response)
    cart = cart_service.get_cart(token)
    cart.remove(payload.product_id)
    cart_service.save_cart(token, cart)
    return {"ok": True, "cart": cart.to_payload()}


@app.post("/api/checkout")
async def checkout(
    payload: CheckoutRequest,
    request: Request,
    response: Response,
    session: AsyncSession = Depends(get_session),
) -> Dict[str, Any]:
    token = _cart_token(request, response)
    cart = cart_service.get_cart(token)
    order = await create_order(
        session,
        cart=cart,
        name=payload.name,
        email=payload.email,
        address=payload.address,
    )
    cart_service.clear_cart(token)
    return {"ok": True, "order_id": order.id}


@app.get("/api/orders/{order_id}")
async def order_confirmation(order_id: int, session: AsyncSession = Depends(get_session)) -> Dict[str, Any]:
    order = await orders_repo.get(session, order_id)
    if order is None:
        raise NotFoundError("Ordren finnes ikke.")
    items = await orders_repo.items_for(session, order_id)
    return {"ok": True, "order": _order_dict(order, list(items))}


# Admin back-office


@app.post("/admin/login")
async def admin_login(payload: LoginRequest, session: AsyncSession = Depends(get_session)) -> Dict[str, Any]:
    if not settings.ADMIN_TOKEN:
        raise HTTPException(status_code=503, detail="Admin token is not configured")
    admin = await admins_repo.verify_admin(session, payload.email, payload.password)
    if admin is None:
        admin_log.warning("admin: failed login for %s", payload.email)
        raise HTTPException(status_code=401, detail="Feil e-post eller passord.")
    admin_log.info("admin: login %s", admin.email)
    return {"ok": True, "token": settings.ADMIN_TOKEN}


@app.get("/admin/stats")
async def admin_stats(
    session: AsyncSession = Depends(get_session),
    _: None = Depends(_require_token),
) -> Dict[str, Any]:
    stats = await orders_repo.stats(session)
    return {
        "ok": True,
        "data": {
            "products": stats.product_count,
            "orders": stats.order_count,
            "revenue_cents": stats.revenue_cents,
            "revenue": format_money(stats.revenue_cents),
        },
    }


@app.get("/admin/content")
async def admin_content(_: None = Depends(_require_token)) -> Dict[str, Any]:
    return {"ok": True, "content": await content_store.get()}


@app.put("/admin/content")
async def admin_update_content(
    payload: Dict[str, Any],
    _: None = Depends(_require_token),
) -> Dict[str, Any]:
    current = await content_store.get()
    saved = await content_store.save(merge_content(current, clean_content_update(payload)))
    return {"ok": True, "content": saved}


@app.get("/admin/products")
async def admin_products(
    session: AsyncSession = Depends(get_session),
    _: None = Depends(_require_token),
) -> Dict[str, Any]:
    items = await products_repo.list_products(session, products_repo.SCOPE_CUSTOM)
    return {"ok": True, "products": [_product_dict(p) for p in items]}


@app.post("/admin/products")
async def admin_create_product(
    payload: ProductPayload,
    session: AsyncSession = Depends(get_session),
    _: None = Depends(_require_token),
) -> Dict[str, Any]:
    data = ProductInput.parse(payload.model_dump(), gallery_paths=payload.gallery)
    product = await products_repo.create_product(session, data)
    admin_log.info("admin: product %s created", product.id)
    return {"ok": True, "product": _product_dict(product)}


@app.post("/admin/products/reorder")
async def admin_reorder_products(
    payload: ReorderRequest,
    session: AsyncSession = Depends(get_session),
    _: None = Depends(_require_token),
) -> Dict[str, Any]:
    ids = products_repo.parse_order_param(payload.order)
    if not ids:
        return {"ok": True, "reordered": False}
    reordered = await products_repo.reorder_products(session, ids)
    return {"ok": True, "reordered": reordered}


@app.get("/admin/products/{product_id}")
async def admin_product(
    product_id: int,
    session: AsyncSession = Depends(get_session),
    _: None = Depends(_require_token),
) -> Dict[str, Any]:
    product = await products_repo.get(session, product_id)
    if product is None:
        raise NotFoundError("Produktet finnes ikke.")
    payload = _product_dict(product)
    payload["images"] = [
        {"id": image.id, "image_path": image.image_path, "sort_order": image.sort_order}
        for image in await products_repo.list_product_images(session, product_id)
    ]
    return {"ok": True, "product": payload}


@app.put("/admin/products/{product_id}")
async def admin_update_product(
    product_id: int,
    payload: ProductPayload,
    session: AsyncSession = Depends(get_session),
    _: None = Depends(_require_token),
) -> Dict[str, Any]:
    product = await products_repo.get(session, product_id)
    if product is None:
        raise NotFoundError("Produktet finnes ikke.")
    data = ProductInput.parse(payload.model_dump(), gallery_paths=payload.gallery)
    product = await products_repo.update_product(session, product, data)
    return {"ok": True, "product": _product_dict(product)}


@app.delete("/admin/products/{product_id}")
async def admin_delete_product(
    product_id: int,
    session: AsyncSession = Depends(get_session),
    _: None = Depends(_require_token),
) -> Dict[str, Any]:
    deleted = await products_repo.delete_product(session, product_id)
    if deleted:
        admin_log.info("admin: product %s deleted", product_id)
    return {"ok": True, "deleted": deleted}


@app.delete("/admin/products/{product_id}/images/{image_id}")
async def admin_delete_product_image(
    product_id: int,
    image_id: int,
    session: AsyncSession = Depends(get_session),
    _: None = Depends(_require_token),
) -> Dict[str, Any]:
    deleted = await products_repo.delete_product_image(session, product_id, image_id)
    return {"ok": True, "deleted": deleted}


@app.post("/admin/uploads")
async def admin_upload(request: Request, _: None = Depends(_require_token)) -> Dict[str, Any]:
    data = await read_upload_body(
        request.stream(),
        declared_length=request.headers.get("Content-Length"),
    )
    path = save_upload(
        request.headers.get("X-Filename", "upload"),
        request.headers.get("Content-Type"),
        data,
    )
    return {"ok": True, "path": path}


@app.post("/admin/sync")
async def admin_sync(_: None = Depends(_require_token)) -> Dict[str, Any]:
    result = await sync_catalog()
    return {"ok": result.ok, "count": result.count}


@app.get("/admin/orders")
async def admin_orders(
    session: AsyncSession = Depends(get_session),
    _: None = Depends(_require_token),
) -> Dict[str, Any]:
    items = await orders_repo.list_recent(session)
    return {"ok": True, "orders": [_order_dict(order) for order in items]}


@app.get("/admin/orders/{order_id}")
async def admin_order(
    order_id: int,
    session: AsyncSession = Depends(get_session),
    _: None = Depends(_require_token),
) -> Dict[str, Any]:
    order = await orders_repo.get(session, order_id)
    if order is None:
        raise NotFoundError("Ordren finnes ikke.")
    items = await orders_repo.items_for(session, order_id)
    return {"ok": True, "order": _order_dict(order, list(items))}


__all__ = ["app"]
