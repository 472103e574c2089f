from bs4 import BeautifulSoup

from affiliate.document import process_affiliate_links, rewrite_html, rewrite_links

FRAGMENT = (
    '<p>Grab it <a href="https://www.amazon.com/dp/B000ABC123">here</a> '
    'or read <a href="https://example.com/review">the review</a>.</p>'
)


def hrefs(html):
    return [a["href"] for a in BeautifulSoup(html, "html.parser").find_all("a")]


def test_only_recognized_links_are_rewritten(site_settings):
    site_settings["affiliate_amazon_com"] = "mytag-20"

    result = rewrite_html(FRAGMENT)

    assert hrefs(result) == [
        "https://www.amazon.com/dp/B000ABC123?tag=mytag-20",
        "https://example.com/review",
    ]
    assert "the review</a>" in result


def test_unchanged_fragment_is_returned_as_is(site_settings):
    assert rewrite_html(FRAGMENT) is FRAGMENT
    assert rewrite_html("") == ""


def test_process_affiliate_links_updates_in_place(site_settings):
    site_settings["affiliate_ldlc_com"] = "promo42"
    doc = BeautifulSoup(
        '<a href="https://www.ldlc.com/fiche/PB1.html">LDLC</a><a name="top">no href</a>',
        "html.parser",
    )

    assert process_affiliate_links(doc) == 1
    assert doc.a["href"] == "https://www.ldlc.com/fiche/PB1.html#promo42"
    assert not doc.find_all("a")[1].has_attr("href")


def test_processing_twice_is_idempotent(site_settings):
    site_settings["affiliate_amazon_com"] = "mytag-20"
    site_settings["affiliate_ldlc_com"] = "promo42"
    html = (
        '<a href="https://www.amazon.com/s?k=desk+lamp&ref=nb_sb&crid=1">lamp</a>'
        '<a href="https://ldlc.com/x">ldlc</a>'
    )
    doc = BeautifulSoup(html, "html.parser")
    process_affiliate_links(doc)
    once = str(doc)

    assert process_affiliate_links(doc) == 0
    assert str(doc) == once
    assert hrefs(once) == [
        "https://www.amazon.com/s?tag=mytag-20&k=desk+lamp&ref=nb_sb",
        "https://ldlc.com/x#promo42",
    ]


def test_rewrite_links_accepts_host_anchors():
    anchors = [{"href": "https://a"}, {"href": "https://b"}]

    changed = rewrite_links(anchors, lambda url: url.upper() if url.endswith("b") else url)

    assert changed == 1
    assert anchors == [{"href": "https://a"}, {"href": "HTTPS://B"}]
