from busquedas.crossfilter import extract_word_counts, normalize_rows, tokenize, top_words


def test_tokenize_keeps_accents_and_drops_mixed_tokens():
    assert tokenize("café gato123 el-niño ÑOÑO") == ["café", "el", "niño", "ñoño"]


def test_tokenize_empty_and_numeric():
    assert tokenize("") == []
    assert tokenize("2023 42") == []
    assert tokenize("  ¿Historia,  del arte?  ") == ["historia", "del", "arte"]


def test_extract_word_counts_over_records():
    records = normalize_rows(
        [
            {"fecha": "2023-01-01", "criterio_texto": "café gato123 el-niño ÑOÑO"},
            {"fecha": "2023-01-02", "criterio_texto": None},
        ]
    )
    assert extract_word_counts(records) == {"café": 1, "el": 1, "niño": 1, "ñoño": 1}


def test_top_words_orders_by_count_then_text():
    counts = {"b": 2, "a": 2, "c": 5, "d": 1}
    assert top_words(counts) == [("c", 5), ("a", 2), ("b", 2), ("d", 1)]
    assert top_words(counts, 2) == [("c", 5), ("a", 2)]
    assert top_words(counts, 0) == []
