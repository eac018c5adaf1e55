import unittest
from types import SimpleNamespace
from unittest import mock

from storelink.services.content_service import (
    DESCRIPTION_EMPTY,
    DESCRIPTION_FALLBACK,
    SKU_EMPTY,
    ContentClientError,
    ContentService,
    GenerativeContentClient,
    strip_data_url,
)


class ContentServiceFallbackTest(unittest.TestCase):
    def test_unconfigured_service_uses_fallbacks(self):
        content = ContentService(client=None, client_error="no key")
        self.assertFalse(content.enabled)
        self.assertEqual(content.generate_description("Tee", "Apparel"), DESCRIPTION_FALLBACK)
        self.assertTrue(content.suggest_sku("Tee", "Apparel").startswith("SKU-"))
        self.assertEqual(content.generate_lifestyle_images("aGVsbG8=", "Apparel"), [])

    def test_text_results_are_cleaned(self):
        client = mock.Mock()
        client.generate_text.side_effect = ["  A soft cotton tee.  ", " ap-tee-01 \n"]
        content = ContentService(client=client)
        self.assertEqual(content.generate_description("Tee", "Apparel"), "A soft cotton tee.")
        self.assertEqual(content.suggest_sku("Tee", "Apparel"), "AP-TEE-01")

    def test_empty_responses(self):
        client = mock.Mock()
        client.generate_text.return_value = "   "
        content = ContentService(client=client)
        self.assertEqual(content.generate_description("Tee", "Apparel"), DESCRIPTION_EMPTY)
        self.assertEqual(content.suggest_sku("Tee", "Apparel"), SKU_EMPTY)

    def test_client_failure_falls_back(self):
        client = mock.Mock()
        client.generate_text.side_effect = ContentClientError("boom")
        content = ContentService(client=client)
        self.assertEqual(content.generate_description("Tee", "Apparel"), DESCRIPTION_FALLBACK)

    def test_smart_suggestions_keeps_given_sku(self):
        client = mock.Mock()
        client.generate_text.return_value = "Nice chair."
        content = ContentService(client=client)
        result = content.smart_suggestions("Chair", "Home & Office", sku=" hm-chr ")
        self.assertEqual(result, {"description": "Nice chair.", "sku": "HM-CHR"})
        self.assertEqual(client.generate_text.call_count, 1)

    def test_lifestyle_images_are_capped_and_encoded(self):
        client = mock.Mock()
        client.generate_images.return_value = [b"one", b"two"]
        content = ContentService(client=client)
        images = content.generate_lifestyle_images("data:image/png;base64,aGVsbG8=", "Apparel")
        self.assertEqual(images, ["b25l", "dHdv"])
        image_bytes, prompt = client.generate_images.call_args_list[0][0]
        self.assertEqual(image_bytes, b"hello")
        self.assertIn("Apparel", prompt)

    def test_invalid_source_image_returns_empty(self):
        client = mock.Mock()
        content = ContentService(client=client)
        self.assertEqual(content.generate_lifestyle_images("https://cdn/img.jpg", "Apparel"), [])
        client.generate_images.assert_not_called()

    def test_strip_data_url(self):
        self.assertEqual(strip_data_url("data:image/jpeg;base64,QUJD"), "QUJD")
        self.assertEqual(strip_data_url("QUJD"), "QUJD")


class GenerativeContentClientTest(unittest.TestCase):
    def test_missing_key_is_rejected(self):
        with self.assertRaises(ContentClientError):
            GenerativeContentClient(None, text_model="t", image_model="i")

    @mock.patch("storelink.services.content_service.genai")
    def test_generate_images_collects_inline_data(self, genai):
        response = SimpleNamespace(
            candidates=[
                SimpleNamespace(
                    content=SimpleNamespace(
                        parts=[
                            SimpleNamespace(inline_data=None, text="caption"),
                            SimpleNamespace(inline_data=SimpleNamespace(data=b"png-bytes")),
                        ]
                    )
                )
            ]
        )
        genai.GenerativeModel.return_value.generate_content.return_value = response
        client = GenerativeContentClient("key-1", text_model="t", image_model="img-model")

        self.assertEqual(client.generate_images(b"src", "prompt"), [b"png-bytes"])
        genai.GenerativeModel.assert_called_once_with(model_name="img-model")

    @mock.patch("storelink.services.content_service.genai")
    def test_request_errors_are_wrapped(self, genai):
        genai.GenerativeModel.return_value.generate_content.side_effect = RuntimeError("quota")
        client = GenerativeContentClient("key-2", text_model="t", image_model="i")
        with self.assertRaises(ContentClientError):
            client.generate_text("hello")


if __name__ == "__main__":
    unittest.main()
