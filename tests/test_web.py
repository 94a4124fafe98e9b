from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone

import httpx
import pytest
from sqlalchemy import select

from storefront import web
from storefront.catalog.collections import CollectionResult
from storefront.catalog.sync import SyncResult
from storefront.config import settings
from storefront.content.store import ContentStore
from storefront.db.models import SOURCE_CUSTOM, SOURCE_PROMONITOR, Product
from storefront.db.session import get_session
from storefront.repo import admins as admins_repo

TOKEN = "admintoken"
AUTH = {"Authorization": f"Bearer {TOKEN}"}


@pytest.fixture(autouse=True)
def web_settings(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "ADMIN_TOKEN", TOKEN)
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    yield
    web.app.dependency_overrides.clear()


@asynccontextmanager
async def api(memory_db, monkeypatch):
    async with memory_db() as db:
        store = ContentStore(db.sessions, db.engine)
        await store.ensure()
        monkeypatch.setattr(web, "content_store", store)

        async def _session():
            async with db.sessions() as session:
                yield session

        web.app.dependency_overrides[get_session] = _session
        transport = httpx.ASGITransport(app=web.app)
        async with httpx.AsyncClient(transport=transport, base_url="http://shop.test") as client:
            client.db = db  # type: ignore[attr-defined]
            yield client


async def _add_products(db, *rows: dict) -> list[int]:
    now = datetime(2024, 5, 1, tzinfo=timezone.utc)
    async with db.sessions() as session:
        products = [
            Product(
                name=row["name"],
                slug=row["slug"],
                description=row.get("description", "Skjerm"),
                price_cents=row.get("price_cents", 100000),
                image_path=row.get("image_path", "/images/monitor-placeholder.svg"),
                is_featured=row.get("is_featured", False),
                source=row.get("source", SOURCE_CUSTOM),
                sort_order=index,
                created_at=now,
                updated_at=now,
            )
            for index, row in enumerate(rows, start=1)
        ]
        session.add_all(products)
        await session.commit()
        return [product.id for product in products]


@pytest.mark.asyncio
async def test_public_content_and_products(memory_db, monkeypatch):
    async with api(memory_db, monkeypatch) as client:
        await _add_products(
            client.db,
            {"name": "Dobbel", "slug": "dobbel", "is_featured": True},
            {"name": "Trippel", "slug": "trippel", "source": SOURCE_PROMONITOR},
            {"name": "Skjult", "slug": "skjult", "source": "legacy"},
        )

        content = (await client.get("/api/content")).json()
        assert content["ok"] is True
        assert content["content"]["brand"] == "ProMonitor"

        listing = (await client.get("/api/products")).json()
        assert [p["slug"] for p in listing["products"]] == ["dobbel", "trippel"]
        assert listing["products"][0]["price"] == "1 000,00 kr"

        shop = (await client.get("/api/shop")).json()
        assert [p["slug"] for p in shop["offers"]] == ["dobbel"]
        assert shop["content"]["header"]["eyebrow"] == "Tilbud"

        detail = (await client.get("/api/products/trippel")).json()
        assert detail["product"]["images"] == ["/images/monitor-placeholder.svg"]

        missing = await client.get("/api/products/skjult")
        assert missing.status_code == 404
        assert missing.json() == {"ok": False, "error": "Produktet finnes ikke."}


@pytest.mark.asyncio
async def test_cart_and_checkout_flow(memory_db, monkeypatch):
    async with api(memory_db, monkeypatch) as client:
        first, second = await _add_products(
            client.db,
            {"name": "Dobbel", "slug": "dobbel", "price_cents": 449000},
            {"name": "Kabel", "slug": "kabel", "price_cents": 24900},
        )

        await client.post("/api/cart/add", json={"product_id": first})
        await client.post("/api/cart/add", json={"product_id": first, "qty": 2})
        cart = (await client.post("/api/cart/add", json={"product_id": second})).json()["cart"]
        assert cart["count"] == 4
        assert cart["total_cents"] == 3 * 449000 + 24900

        cart = (await client.post("/api/cart/update", json={"quantities": {str(first): 1, str(second): 0}})).json()["cart"]
        assert [item["id"] for item in cart["items"]] == [first]

        incomplete = await client.post("/api/checkout", json={"name": "Kari", "email": "", "address": "Gate 1"})
        assert incomplete.status_code == 400
        assert incomplete.json()["error"] == "Fyll inn alle feltene i kassen."

        done = (await client.post(
            "/api/checkout",
            json={"name": "Kari", "email": "kari@example.no", "address": "Gate 1, Oslo"},
        )).json()
        assert done["ok"] is True

        order = (await client.get(f"/api/orders/{done['order_id']}")).json()["order"]
        assert order["total_cents"] == 449000
        assert order["items"][0]["line_total_cents"] == 449000

        assert (await client.get("/api/cart")).json()["cart"]["items"] == []
        empty = await client.post("/api/checkout", json={"name": "Kari", "email": "k@e.no", "address": "x"})
        assert empty.json()["error"] == "Handlekurven er tom."


@pytest.mark.asyncio
async def test_cart_rejects_unknown_product(memory_db, monkeypatch):
    async with api(memory_db, monkeypatch) as client:
        response = await client.post("/api/cart/add", json={"product_id": 999})
        assert response.status_code == 404


@pytest.mark.asyncio
async def test_admin_routes_require_token(memory_db, monkeypatch):
    async with api(memory_db, monkeypatch) as client:
        assert (await client.get("/admin/stats")).status_code == 401
        assert (await client.get("/admin/stats", headers={"Authorization": "Bearer nope"})).status_code == 401
        assert (await client.get("/admin/stats", params={"token": TOKEN})).status_code == 200

        monkeypatch.setattr(settings, "ADMIN_TOKEN", "")
        assert (await client.get("/admin/stats", headers=AUTH)).status_code == 503


@pytest.mark.asyncio
async def test_admin_login(memory_db, monkeypatch):
    async with api(memory_db, monkeypatch) as client:
        async with client.db.sessions() as session:
            await admins_repo.ensure_default_admin(session, "admin@example.no", "hemmelig")

        ok = await client.post("/admin/login", json={"email": "admin@example.no", "password": "hemmelig"})
        assert ok.json() == {"ok": True, "token": TOKEN}

        bad = await client.post("/admin/login", json={"email": "admin@example.no", "password": "feil"})
        assert bad.status_code == 401


@pytest.mark.asyncio
async def test_admin_content_update_is_cleaned_and_merged(memory_db, monkeypatch):
    async with api(memory_db, monkeypatch) as client:
        response = await client.put(
            "/admin/content",
            headers=AUTH,
            json={
                "hero": {"title": "  Ny tittel  ", "image": ""},
                "timeline": [
                    {"title": "Bestill", "description": "Velg oppsett"},
                    {"title": "", "description": "mangler tittel"},
                ],
            },
        )
        saved = response.json()["content"]
        assert saved["hero"]["title"] == "Ny tittel"
        assert saved["hero"]["image"]
        assert saved["timeline"] == [{"title": "Bestill", "description": "Velg oppsett", "detail": ""}]
        assert saved["brand"] == "ProMonitor"

        public = (await client.get("/api/content")).json()["content"]
        assert public["hero"]["title"] == "Ny tittel"


@pytest.mark.asyncio
async def test_admin_product_lifecycle(memory_db, monkeypatch):
    async with api(memory_db, monkeypatch) as client:
        await _add_products(client.db, {"name": "Synket", "slug": "synket", "source": SOURCE_PROMONITOR})

        invalid = await client.post("/admin/products", headers=AUTH, json={"name": "Uten pris", "description": "x"})
        assert invalid.status_code == 400

        created = []
        for name in ("Dobbel skjerm", "Dobbel skjerm"):
            body = (await client.post(
                "/admin/products",
                headers=AUTH,
                json={"name": name, "description": "To skjermer", "price": "4 490,-", "gallery": ["/uploads/a.png"]},
            )).json()["product"]
            created.append(body)
        assert [p["slug"] for p in created] == ["dobbel-skjerm", "dobbel-skjerm-2"]
        assert created[0]["price_cents"] == 449000
        assert created[0]["image_path"] == "/uploads/a.png"

        ids = [p["id"] for p in created]
        reordered = (await client.post(
            "/admin/products/reorder", headers=AUTH, json={"order": f"{ids[1]},{ids[0]}"}
        )).json()
        assert reordered == {"ok": True, "reordered": True}

        listing = (await client.get("/admin/products", headers=AUTH)).json()["products"]
        assert [p["id"] for p in listing] == [ids[1], ids[0]]

        noop = (await client.post("/admin/products/reorder", headers=AUTH, json={"order": "x,y"})).json()
        assert noop["reordered"] is False

        deleted = (await client.delete(f"/admin/products/{ids[0]}", headers=AUTH)).json()
        assert deleted["deleted"] is True
        async with client.db.sessions() as session:
            remaining = (await session.execute(select(Product.slug).order_by(Product.id))).scalars().all()
        assert remaining == ["synket", "dobbel-skjerm-2"]


@pytest.mark.asyncio
async def test_admin_sync_and_upload(memory_db, monkeypatch):
    async def _sync():
        return SyncResult(ok=True, count=3)

    monkeypatch.setattr(web, "sync_catalog", _sync)
    async with api(memory_db, monkeypatch) as client:
        assert (await client.post("/admin/sync", headers=AUTH)).json() == {"ok": True, "count": 3}

        rejected = await client.post(
            "/admin/uploads",
            headers={**AUTH, "Content-Type": "text/plain", "X-Filename": "notat.txt"},
            content=b"hei",
        )
        assert rejected.status_code == 400
        assert rejected.json()["ok"] is False

        stored = (await client.post(
            "/admin/uploads",
            headers={**AUTH, "Content-Type": "image/png", "X-Filename": "skjerm.png"},
            content=b"\x89PNG",
        )).json()
        assert stored["path"].startswith("/uploads/")
        assert stored["path"].endswith("-skjerm.png")


@pytest.mark.asyncio
async def test_collection_falls_back_to_local_products(memory_db, monkeypatch):
    results = {"value": CollectionResult(ok=False)}

    async def _fetch(handle):
        return results["value"]

    monkeypatch.setattr(web, "fetch_collection_products", _fetch)
    async with api(memory_db, monkeypatch) as client:
        await _add_products(client.db, {"name": "Dobbel", "slug": "dobbel"})

        failed = (await client.get("/api/collections/dual-monitor")).json()
        assert failed["error"] == web.COLLECTION_FALLBACK_MESSAGE
        assert [p["slug"] for p in failed["products"]] == ["dobbel"]
        assert failed["collection"]["title"]

        results["value"] = CollectionResult(ok=False, disabled=True)
        disabled = (await client.get("/api/collections/ukjent")).json()
        assert disabled["error"] is None
        assert disabled["collection"]["title"] == "Kolleksjon"

        card = {"id": 7, "name": "Remote", "slug": "remote", "price_cents": 100, "image_path": "https://x/y.png"}
        results["value"] = CollectionResult(ok=True, products=[card])
        live = (await client.get("/api/collections/dual-monitor")).json()
        assert live["products"] == [card]
        assert live["error"] is None


@pytest.mark.asyncio
async def test_admin_content_null_sections_keep_defaults(memory_db, monkeypatch):
    async with api(memory_db, monkeypatch) as client:
        defaults = (await client.get("/api/content")).json()["content"]

        response = await client.put("/admin/content", headers=AUTH, json={"hero": None, "shop": None})
        saved = response.json()["content"]
        assert saved["hero"] == defaults["hero"]
        assert saved["shop"] == defaults["shop"]

        shop = (await client.get("/api/shop")).json()
        assert shop["content"] == defaults["shop"]


@pytest.mark.asyncio
async def test_admin_upload_over_limit_is_rejected(memory_db, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_MAX_BYTES", 8)
    async with api(memory_db, monkeypatch) as client:
        response = await client.post(
            "/admin/uploads",
            headers={**AUTH, "Content-Type": "image/png", "X-Filename": "stor.png"},
            content=b"\x89PNG" + b"0" * 32,
        )
        assert response.status_code == 400
        assert response.json() == {"ok": False, "error": "Bildet er for stort."}


@pytest.mark.asyncio
async def test_admin_product_slug_keeps_decimal_sizes_apart(memory_db, monkeypatch):
    async with api(memory_db, monkeypatch) as client:
        body = (await client.post(
            "/admin/products",
            headers=AUTH,
            json={"name": 'Skjerm 15,6"', "description": "Bærbar", "price": "2 999,-"},
        )).json()["product"]
        assert body["slug"] == "skjerm-15-6"
