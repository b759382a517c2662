import unittest

from resumeiq.parsing.parse import (
    SCANNED_MESSAGE,
    ScannedDocument,
    UnreadableDocument,
    extract_text,
)
from support import RESUME_LINES, make_pdf, resume_pdf


class TextExtractionTests(unittest.TestCase):
    def test_text_bearing_pdf_returns_its_text(self):
        text = extract_text(resume_pdf())
        self.assertIn("Jane Doe", text)
        self.assertIn("PostgreSQL", text)

    def test_pages_are_concatenated_in_document_order(self):
        pdf = make_pdf([["FIRST PAGE MARKER", *RESUME_LINES[:3]], ["SECOND PAGE MARKER", *RESUME_LINES[3:]]])
        text = extract_text(pdf)
        self.assertLess(text.index("FIRST PAGE MARKER"), text.index("SECOND PAGE MARKER"))

    def test_short_text_layer_is_treated_as_scanned(self):
        forty_chars = "Jane Doe Backend Developer Python SQL 12"
        self.assertEqual(len(forty_chars), 40)
        with self.assertRaises(ScannedDocument) as ctx:
            extract_text(make_pdf([[forty_chars]]))
        self.assertEqual(str(ctx.exception), SCANNED_MESSAGE)

    def test_pdf_without_text_layer_is_scanned(self):
        with self.assertRaises(ScannedDocument):
            extract_text(make_pdf([[]]))

    def test_non_pdf_bytes_are_unreadable(self):
        with self.assertRaises(UnreadableDocument) as ctx:
            extract_text(b"this is definitely not a pdf document")
        self.assertIn("export it from Word or Google Docs", str(ctx.exception))

    def test_threshold_is_configurable(self):
        text = extract_text(make_pdf([["short but fine"]]), min_chars=5)
        self.assertIn("short but fine", text)


if __name__ == "__main__":
    unittest.main()
