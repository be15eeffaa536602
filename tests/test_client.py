from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import pytest
from aiohttp import test_utils, web

from pycarbook.client import CarbookClient
from pycarbook.config import CarbookConfig
from pycarbook.exceptions import CarbookError
from pycarbook.storage import MemoryStorage, UnavailableStorage


def _site(received: dict[str, list[Any]]) -> web.Application:
    async def orders_snapshot(_request: web.Request) -> web.Response:
        return web.json_response([{"orderId": "PO-1", "status": "pending"}])

    async def bookings_snapshot(_request: web.Request) -> web.Response:
        return web.Response(status=404)

    def recorder(name: str):
        async def handler(request: web.Request) -> web.Response:
            received.setdefault(name, []).append(await request.json())
            return web.json_response({"success": True})

        return handler

    app = web.Application()
    app.router.add_get("/data/purchase-orders.json", orders_snapshot)
    app.router.add_get("/data/bookings.json", bookings_snapshot)
    app.router.add_post("/api/save-order.php", recorder("save"))
    app.router.add_post("/api/update-order.php", recorder("update"))
    return app


@pytest.mark.asyncio
async def test_client_against_site_server() -> None:
    received: dict[str, list[Any]] = {}
    server = test_utils.TestServer(_site(received))
    await server.start_server()
    storage = MemoryStorage()
    try:
        config = CarbookConfig(base_url=f"http://{server.host}:{server.port}", request_timeout=5)
        async with CarbookClient(config, storage=storage) as client:
            assert await client.load_orders() == [{"orderId": "PO-1", "status": "pending"}]
            assert await client.load_bookings() == []

            saved = await client.save_order({"orderId": "PO-2", "status": "pending"})
            updated = await client.update_order_status("PO-1", "approved")
            assert saved.success
            assert updated.success
    finally:
        await server.close()

    # Leaving the context drains the detached mirror calls.
    assert received["save"] == [{"orderId": "PO-2", "status": "pending"}]
    assert received["update"] == [
        {
            "orderId": "PO-1",
            "status": "approved",
            "orders": [
                {"orderId": "PO-1", "status": "approved"},
                {"orderId": "PO-2", "status": "pending"},
            ],
        }
    ]


@pytest.mark.asyncio
async def test_client_await_mirror_reports_server_success() -> None:
    received: dict[str, list[Any]] = {}
    server = test_utils.TestServer(_site(received))
    await server.start_server()
    try:
        config = CarbookConfig(base_url=f"http://{server.host}:{server.port}", await_mirror=True)
        async with CarbookClient(config, storage=MemoryStorage()) as client:
            result = await client.save_order({"orderId": "PO-9", "status": "pending"})
    finally:
        await server.close()

    assert result.message == "Order saved successfully"
    assert result.mirrored is True


@pytest.mark.asyncio
async def test_client_bookings_use_injected_transport(backend) -> None:
    backend.snapshots["/data/bookings.json"] = [{"bookingId": "BK-1", "status": "pending"}]

    async with CarbookClient(CarbookConfig(), storage=MemoryStorage(), transport=backend) as client:
        assert await client.get_all_bookings() == [{"bookingId": "BK-1", "status": "pending"}]
        result = await client.update_booking_status("BK-1", "confirmed")
        saved = await client.save_booking({"bookingId": "BK-2", "status": "pending"})

    assert result.message == "Booking status updated"
    assert saved.message == "Booking saved successfully"
    assert backend.posts == []


@pytest.mark.asyncio
async def test_client_drains_pending_mirrors_on_exit(backend) -> None:
    backend.post_gate = asyncio.Event()

    async with CarbookClient(CarbookConfig(), storage=MemoryStorage(), transport=backend) as client:
        await client.save_order({"orderId": "PO-1", "status": "pending"})
        assert client.orders.pending_mirrors == 1
        asyncio.get_running_loop().call_later(0.01, backend.post_gate.set)

    assert [path for path, _ in backend.posts] == ["/api/save-order.php"]


@pytest.mark.asyncio
async def test_client_local_only_without_base_url(tmp_path: Path) -> None:
    config = CarbookConfig(storage_path=str(tmp_path / "storage.json"))

    async with CarbookClient(config) as client:
        assert await client.load_orders() == []
        assert (await client.save_order({"orderId": "PO-1", "status": "pending"})).success

    async with CarbookClient(config) as client:
        assert await client.get_all_orders() == [{"orderId": "PO-1", "status": "pending"}]
        assert (await client.update_order_status("PO-1", "cancelled")).message == "Order status updated in local storage"
        assert (await client.update_order_status("PO-404", "cancelled")).message == "Order not found"


@pytest.mark.asyncio
async def test_client_without_storage_facility() -> None:
    async with CarbookClient(CarbookConfig(), storage=UnavailableStorage()) as client:
        assert await client.load_bookings() == []
        result = await client.save_booking({"bookingId": "BK-1", "status": "pending"})

    assert not result.success


def test_client_requires_context_manager() -> None:
    client = CarbookClient(CarbookConfig())

    with pytest.raises(CarbookError):
        _ = client.bookings


def test_client_catalog_helpers() -> None:
    assert CarbookClient.calculate_booking_price("Toyota", "Camry", 3) == 150
    assert CarbookClient.calculate_booking_price("Lexus", "ES", 2) == 120
    assert "Corolla" in CarbookClient.get_car_models("Toyota")
    assert "Tesla" in CarbookClient.get_car_brands()
    assert "East Legon" in CarbookClient.get_accra_locations()
