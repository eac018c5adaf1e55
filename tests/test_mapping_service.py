import unittest
from unittest import mock

from sqlalchemy.orm import sessionmaker

from storelink.config import Settings
from storelink.core.errors import (
    ActionInProgressError,
    EntityNotFoundError,
    PreconditionFailed,
    ValidationFailed,
)
from storelink.core.inflight import inflight
from storelink.database import Base, build_engine
from storelink.models import Product, ProductVariant, Store, StoreMapping, StoreVariantMapping
from storelink.schemas.mapping import MappingOperation, StoreMappingDraft
from storelink.services.mapping_service import (
    edit_mappings,
    save_mappings,
    sync_mapping,
    toggle_mapping_enabled,
)


def _seed(db):
    db.add_all(
        [
            Store(id="st_001", name="New York", location="NY", type="RETAIL", ownership="OWN"),
            Store(id="st_002", name="London", location="UK", type="RETAIL", ownership="OWN"),
        ]
    )
    variant = ProductVariant(id="var_1", position=0, sku="AP-TEE-BLAM", color="Black", size="M", price_adjustment=0)
    product = Product(
        id="prod_1",
        sku="AP-TEE",
        name="Tee",
        category="Apparel",
        base_price=25,
        status="ACTIVE",
        images=["img"],
        variants=[variant],
    )
    product.mappings.append(
        StoreMapping(
            store_id="st_001",
            spid="001-AP-AAA",
            price=25,
            base_stock=0,
            enabled=True,
            variant_mappings=[StoreVariantMapping(variant=variant, spid="001-BLAM-AAA", price=25, stock=8)],
        )
    )
    db.add(product)
    db.commit()


class MappingServiceTest(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        engine = build_engine("sqlite://")
        Base.metadata.create_all(bind=engine)
        self.db = sessionmaker(bind=engine, expire_on_commit=False)()
        _seed(self.db)

    def tearDown(self):
        self.db.close()

    def test_preview_does_not_persist(self):
        editor = edit_mappings(
            self.db,
            "prod_1",
            [MappingOperation(op="toggle_store", store_id="st_002")],
            commit=False,
        )
        self.assertTrue(editor.is_dirty)
        self.assertEqual(len(editor.mappings), 2)
        self.assertEqual(len(self.db.get(Product, "prod_1").mappings), 1)

    def test_commit_persists_staged_changes(self):
        edit_mappings(
            self.db,
            "prod_1",
            [
                MappingOperation(op="toggle_store", store_id="st_002"),
                MappingOperation(op="update_variant", store_id="st_001", variant_id="var_1", stock=3),
            ],
            commit=True,
        )
        product = self.db.get(Product, "prod_1")
        self.assertEqual(sorted(m.store_id for m in product.mappings), ["st_001", "st_002"])
        self.assertEqual(product.mapping_for("st_001").stock, 3)
        self.assertEqual(product.mapping_for("st_002").stock, 1000)

    def test_save_rejects_duplicate_store(self):
        drafts = [
            StoreMappingDraft(store_id="st_001", spid="a", price=1, base_stock=1),
            StoreMappingDraft(store_id="st_001", spid="b", price=1, base_stock=1),
        ]
        with self.assertRaises(ValidationFailed) as ctx:
            save_mappings(self.db, "prod_1", drafts)
        self.assertIn("mappings[1].store_id", ctx.exception.errors)

    def test_save_reconciles_missing_variant_mappings(self):
        drafts = [StoreMappingDraft(store_id="st_002", spid="lon-1", price=30, base_stock=5)]
        product = save_mappings(self.db, "prod_1", drafts)
        self.assertEqual([m.store_id for m in product.mappings], ["st_002"])
        mapping = product.mapping_for("st_002")
        self.assertEqual(mapping.spid, "LON-1")
        self.assertEqual([vm.variant_id for vm in mapping.variant_mappings], ["var_1"])
        self.assertEqual(mapping.stock, 1000)

    def test_unique_spids_reject_other_products_in_same_store(self):
        self.db.add(
            Product(id="prod_2", sku="EL-LPT", name="Laptop", category="Electronics", base_price=900, images=["img"])
        )
        self.db.commit()
        with mock.patch(
            "storelink.services.mapping_service.get_settings",
            return_value=Settings(ENFORCE_UNIQUE_SPIDS=True),
        ):
            with self.assertRaises(ValidationFailed) as ctx:
                save_mappings(
                    self.db,
                    "prod_2",
                    [StoreMappingDraft(store_id="st_001", spid="001-ap-aaa", price=900, base_stock=3)],
                )
            self.assertIn("001-AP-AAA", ctx.exception.errors["mappings[0].spid"])

            # Same SPID in another store is fine.
            product = save_mappings(
                self.db,
                "prod_2",
                [StoreMappingDraft(store_id="st_002", spid="001-AP-AAA", price=900, base_stock=3)],
            )
            self.assertEqual(product.mapping_for("st_002").spid, "001-AP-AAA")

    def test_unique_spids_ignore_the_products_own_mappings(self):
        mapping = self.db.get(Product, "prod_1").mapping_for("st_001")
        drafts = [StoreMappingDraft.model_validate(mapping, from_attributes=True)]
        drafts[0].price = 27
        with mock.patch(
            "storelink.services.mapping_service.get_settings",
            return_value=Settings(ENFORCE_UNIQUE_SPIDS=True),
        ):
            product = save_mappings(self.db, "prod_1", drafts)
        saved = product.mapping_for("st_001")
        self.assertEqual(saved.spid, "001-AP-AAA")
        self.assertEqual(saved.price, 27)
        self.assertEqual(saved.variant_mapping_for("var_1").spid, "001-BLAM-AAA")

    def test_toggle_enabled_keeps_mapping_data(self):
        mapping = self.db.get(Product, "prod_1").mapping_for("st_001")
        before = (mapping.spid, mapping.price, mapping.stock, len(mapping.variant_mappings))
        product = toggle_mapping_enabled(self.db, "prod_1", "st_001")
        mapping = product.mapping_for("st_001")
        self.assertFalse(mapping.enabled)
        self.assertEqual((mapping.spid, mapping.price, mapping.stock, len(mapping.variant_mappings)), before)

    def test_toggle_missing_mapping(self):
        with self.assertRaises(EntityNotFoundError):
            toggle_mapping_enabled(self.db, "prod_1", "st_002")

    async def test_sync_enabled_mapping(self):
        result = await sync_mapping(self.db, "prod_1", "st_001", delay=0)
        self.assertEqual(result["spid"], "001-AP-AAA")
        self.assertEqual(result["stock"], 8)

    async def test_sync_disabled_mapping_is_rejected(self):
        toggle_mapping_enabled(self.db, "prod_1", "st_001")
        with self.assertRaises(PreconditionFailed):
            await sync_mapping(self.db, "prod_1", "st_001", delay=0)

    async def test_sync_while_pending_is_rejected(self):
        with inflight.claim(("store_sync", "prod_1", "st_001")):
            with self.assertRaises(ActionInProgressError):
                await sync_mapping(self.db, "prod_1", "st_001", delay=0)
        self.assertFalse(inflight.is_pending(("store_sync", "prod_1", "st_001")))


if __name__ == "__main__":
    unittest.main()
