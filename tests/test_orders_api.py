from datetime import datetime, timedelta, timezone


def order_body(customer="Acme", items=(), placed_at=None):
    body = {
        "customer_name": customer,
        "items": [{"inventory_item_id": i, "quantity": q} for i, q in items],
    }
    if placed_at:
        body["placed_at"] = placed_at
    return body


class TestCreateOrder:
    async def test_created_with_resolved_item_names(self, client, create_item):
        crate = await create_item("Crate", 5, "B2")
        pallet = await create_item("Pallet", 10, "A1")

        r = await client.post("/api/orders/", json=order_body(items=[(crate["id"], 2), (pallet["id"], 1)]))

        assert r.status_code == 201
        data = r.json()
        assert data["customer_name"] == "Acme"
        assert [(i["inventory_item_id"], i["item_name"], i["quantity"]) for i in data["items"]] == [
            (crate["id"], "Crate", 2),
            (pallet["id"], "Pallet", 1),
        ]

    async def test_quantity_defaults_to_one(self, client, create_item):
        crate = await create_item("Crate", 5, "B2")
        r = await client.post(
            "/api/orders/", json={"customer_name": "Acme", "items": [{"inventory_item_id": crate["id"]}]}
        )
        assert r.status_code == 201
        assert r.json()["items"][0]["quantity"] == 1

    async def test_clerk_can_place_orders(self, client, create_item, login_as, clerk):
        crate = await create_item("Crate", 5, "B2")
        login_as(clerk)
        r = await client.post("/api/orders/", json=order_body(items=[(crate["id"], 1)]))
        assert r.status_code == 201

    async def test_stock_not_decremented(self, client, create_item):
        crate = await create_item("Crate", 5, "B2")
        await client.post("/api/orders/", json=order_body(items=[(crate["id"], 4)]))

        listed = await client.get("/api/inventory/")
        assert listed.json()[0]["quantity"] == 5

    async def test_does_not_invalidate_inventory_cache(self, client, create_item):
        crate = await create_item("Crate", 5, "B2")
        await client.get("/api/inventory/")

        await client.post("/api/orders/", json=order_body(items=[(crate["id"], 1)]))

        assert (await client.get("/api/inventory/")).headers["X-Cache"] == "HIT"


class TestCreateOrderRejections:
    async def test_reasons(self, client, create_item):
        crate = await create_item("Crate", 5, "B2")
        cases = [
            (order_body(customer="  ", items=[(crate["id"], 1)]), "EmptyCustomerName"),
            (order_body(items=[]), "NoItems"),
            (order_body(items=[(crate["id"], 0)]), "NonPositiveQuantity"),
            (order_body(items=[(crate["id"], 1), (999, 1)]), "UnknownInventoryItems"),
        ]
        for body, reason in cases:
            r = await client.post("/api/orders/", json=body)
            assert r.status_code == 400, body
            assert r.json()["reason"] == reason

        assert (await client.get("/api/orders/")).json() == []

    async def test_malformed_body(self, client):
        r = await client.post("/api/orders/", json={"customer_name": "Acme", "items": [{"quantity": 1}]})
        assert r.status_code == 400


class TestReadOrders:
    async def test_get_by_id(self, client, create_item):
        crate = await create_item("Crate", 5, "B2")
        created = (await client.post("/api/orders/", json=order_body(items=[(crate["id"], 2)]))).json()

        r = await client.get(f"/api/orders/{created['id']}")

        assert r.status_code == 200
        assert r.json() == created

    async def test_get_missing(self, client):
        r = await client.get("/api/orders/31337")
        assert r.status_code == 404

    async def test_list_newest_first(self, client, create_item):
        crate = await create_item("Crate", 5, "B2")
        for customer, placed_at in [
            ("Jan", "2024-01-15T09:00:00Z"),
            ("Mar", "2024-03-15T09:00:00Z"),
            ("Feb", "2024-02-15T09:00:00+00:00"),
        ]:
            r = await client.post(
                "/api/orders/", json=order_body(customer=customer, items=[(crate["id"], 1)], placed_at=placed_at)
            )
            assert r.status_code == 201

        r = await client.get("/api/orders/")

        assert r.status_code == 200
        assert "X-Elapsed-ms" in r.headers
        assert [o["customer_name"] for o in r.json()] == ["Mar", "Feb", "Jan"]

    async def test_requires_authentication(self, anonymous_client):
        assert (await anonymous_client.get("/api/orders/")).status_code == 401


class TestDeleteOrder:
    async def test_deleted(self, client, create_item):
        crate = await create_item("Crate", 5, "B2")
        created = (await client.post("/api/orders/", json=order_body(items=[(crate["id"], 2)]))).json()

        r = await client.delete(f"/api/orders/{created['id']}")

        assert r.status_code == 204
        assert (await client.get(f"/api/orders/{created['id']}")).status_code == 404
        # Lines are gone, so the item is no longer protected from deletion.
        assert (await client.delete(f"/api/inventory/{crate['id']}")).status_code == 204

    async def test_missing(self, client):
        assert (await client.delete("/api/orders/5")).status_code == 404

    async def test_requires_manager_role(self, client, create_item, login_as, clerk):
        crate = await create_item("Crate", 5, "B2")
        created = (await client.post("/api/orders/", json=order_body(items=[(crate["id"], 2)]))).json()
        login_as(clerk)

        assert (await client.delete(f"/api/orders/{created['id']}")).status_code == 403


class TestIdsOutsideStorableRange:
    HUGE = 2**70

    async def test_create_with_huge_item_id_is_unknown_item(self, client, create_item):
        crate = await create_item("Crate", 5, "B2")

        r = await client.post("/api/orders/", json=order_body(items=[(crate["id"], 1), (self.HUGE, 1)]))

        assert r.status_code == 400
        assert r.json()["reason"] == "UnknownInventoryItems"
        assert (await client.get("/api/orders/")).json() == []

    async def test_create_with_non_positive_item_id_is_unknown_item(self, client):
        r = await client.post("/api/orders/", json=order_body(items=[(0, 1), (-5, 1)]))
        assert r.status_code == 400
        assert r.json()["reason"] == "UnknownInventoryItems"

    async def test_get_huge_id_not_found(self, client):
        assert (await client.get(f"/api/orders/{self.HUGE}")).status_code == 404

    async def test_delete_huge_id_not_found(self, client):
        assert (await client.delete(f"/api/orders/{self.HUGE}")).status_code == 404


class TestPlacedAtTimezone:
    async def test_offset_returned_as_utc(self, client, create_item):
        crate = await create_item("Crate", 5, "B2")

        created = await client.post(
            "/api/orders/", json=order_body(items=[(crate["id"], 1)], placed_at="2024-01-01T12:00:00+02:00")
        )
        fetched = await client.get(f"/api/orders/{created.json()['id']}")

        for r in (created, fetched):
            placed_at = datetime.fromisoformat(r.json()["placed_at"].replace("Z", "+00:00"))
            assert placed_at == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
            assert placed_at.utcoffset() == timedelta(0)
