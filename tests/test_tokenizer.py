import unittest

from listquery.services.tokenizer import tokenize


class TokenizerTests(unittest.TestCase):
    def test_empty_input_yields_no_tokens(self):
        self.assertEqual(tokenize(""), {})
        self.assertEqual(tokenize(None), {})

    def test_splits_pairs_on_ampersand(self):
        self.assertEqual(
            tokenize("pageNumber=2&pageSize=10&status=Active|Pending||eq"),
            {"pageNumber": "2", "pageSize": "10", "status": "Active|Pending||eq"},
        )

    def test_input_is_url_decoded_before_splitting(self):
        args = tokenize("query=acme%20corp%7C%7Cname&city=New+York||eq")
        self.assertEqual(args["query"], "acme corp||name")
        self.assertEqual(args["city"], "New York||eq")

    def test_malformed_segments_are_dropped(self):
        args = tokenize("pageSize=5&=orphan&novalue=&no-word=1&justtext&name=Acme||eq")
        self.assertEqual(args, {"pageSize": "5", "name": "Acme||eq"})

    def test_value_keeps_everything_after_first_equals(self):
        self.assertEqual(tokenize("formula=a=b||eq"), {"formula": "a=b||eq"})

    def test_duplicate_keys_keep_last_value(self):
        self.assertEqual(tokenize("status=A||eq&status=B||eq"), {"status": "B||eq"})

    def test_leading_question_mark_is_ignored(self):
        self.assertEqual(tokenize("?pageNumber=3"), {"pageNumber": "3"})


if __name__ == "__main__":
    unittest.main()
