import pytest

HEX_HASH = "C12FE1C06BBA254A9DC9F519B335AA7C1367A88A"
B32_HASH = "MFRGGZDFMZTWQ2LKNNWG23TPOBYXE43U"


def test_parse_magnet_extracts_fields():
    from app.utils.magnet import parse_magnet_uri
    from app.domain.models import MediaType

    uri = f"magnet:?xt=urn:btih:{HEX_HASH}&dn=The.Matrix.1999.1080p.BluRay.x264-GROUP&tr=udp%3A%2F%2Ftracker"
    info = parse_magnet_uri(uri)
    assert info is not None
    assert info.magnet_uri == uri
    assert info.info_hash == HEX_HASH.lower()
    assert info.raw_title == "The.Matrix.1999.1080p.BluRay.x264-GROUP"
    assert info.clean_title == "The Matrix (1999)"
    assert info.inferred_type == MediaType.MOVIE


def test_parse_magnet_base32_hash_and_series():
    from app.utils.magnet import parse_magnet_uri
    from app.domain.models import MediaType

    info = parse_magnet_uri(f"magnet:?xt=urn:btih:{B32_HASH}&dn=Show+Name+S01E02+720p")
    assert info is not None
    assert info.info_hash == B32_HASH.lower()
    assert info.raw_title == "Show Name S01E02 720p"
    assert info.clean_title == "Show Name"
    assert info.inferred_type == MediaType.SERIES


def test_parse_magnet_decodes_percent_encoded_name():
    from app.utils.magnet import parse_magnet_uri

    info = parse_magnet_uri(
        f"magnet:?xt=urn:btih:{HEX_HASH}&dn=www.1TamilMV.pink%20-%20Some%20Movie%20%282020%29%20WEB-DL"
    )
    assert info is not None
    assert info.clean_title == "Some Movie (2020)"


@pytest.mark.parametrize(
    "value",
    ["", "http://example.com/file.torrent", f"xt=urn:btih:{HEX_HASH}", " magnet:?dn=x"],
)
def test_parse_magnet_rejects_non_magnets(value):
    from app.utils.magnet import parse_magnet_uri

    assert parse_magnet_uri(value) is None


def test_parse_magnet_needs_name_or_hash():
    from app.utils.magnet import parse_magnet_uri

    assert parse_magnet_uri("magnet:?tr=udp://tracker") is None
    assert parse_magnet_uri("magnet:?xt=urn:btih:not-a-hash") is None

    only_hash = parse_magnet_uri(f"magnet:?xt=urn:btih:{HEX_HASH}")
    assert only_hash is not None
    assert only_hash.raw_title == ""
    assert only_hash.clean_title == ""

    only_name = parse_magnet_uri("magnet:?dn=Some.Movie.2001")
    assert only_name is not None
    assert only_name.info_hash == ""


def test_magnet_info_to_dict_uses_api_field_names():
    from app.utils.magnet import parse_magnet_uri

    info = parse_magnet_uri(f"magnet:?xt=urn:btih:{HEX_HASH}&dn=Movie.Name.2020.1080p")
    assert info.to_dict() == {
        "magnetUri": f"magnet:?xt=urn:btih:{HEX_HASH}&dn=Movie.Name.2020.1080p",
        "infoHash": HEX_HASH.lower(),
        "title": "Movie.Name.2020.1080p",
        "cleanTitle": "Movie Name (2020)",
        "type": "movie",
    }


def test_scan_magnet_links_dedups_by_hash():
    from app.utils.magnet import scan_magnet_links

    html = f"""
    <html><body>
      <a href="magnet:?xt=urn:btih:{HEX_HASH}&amp;dn=Movie.Name.2020.1080p">1080p</a>
      <a href="magnet:?xt=urn:btih:{HEX_HASH.lower()}&amp;dn=Movie.Name.2020.1080p.mirror">mirror</a>
      <a href="https://example.com/details">details</a>
      <a href="magnet:?xt=urn:btih:{B32_HASH}&amp;dn=Show.S01E01">episode</a>
      <p>copy: magnet:?dn=Another.Film.1984.DVDRip</p>
    </body></html>
    """
    found = scan_magnet_links(html)
    assert [m.clean_title for m in found] == [
        "Movie Name (2020)",
        "Show",
        "Another Film (1984)",
    ]
    assert found[1].inferred_type == "series"


def test_scan_magnet_links_empty_page():
    from app.utils.magnet import scan_magnet_links

    assert scan_magnet_links("") == []
    assert scan_magnet_links("<p>nothing here</p>") == []


def test_parse_magnet_marker_only_name_keeps_a_title():
    from app.utils.magnet import parse_magnet_uri

    info = parse_magnet_uri(f"magnet:?xt=urn:btih:{HEX_HASH}&dn=1080p")
    assert info is not None
    assert info.clean_title == "1080p"
