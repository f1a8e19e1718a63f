"""
Tests for Gallery Resolver

Unit tests for gallery resolution covering:
- Permissive gallery document decoding
- Traversal order of listings, children and items
- Gallery id lookup
- Error handling for bad links and bad documents
"""

import asyncio
import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data.models import GalleryChild, GalleryItem, GalleryListing
from services.gallery_resolver import GalleryResolver, parse_gallery_document, extract_image_links
from services.url_classifier import LinkClassifier
from utils.exceptions import GalleryFetchError, MalformedGalleryUrlError


# =============================================================================
# Document Parsing Tests
# =============================================================================

class TestParseGalleryDocument:
    """Tests for parse_gallery_document."""

    def test_parses_items_in_order(self, gallery_document_factory):
        """Listings, children and items keep their document order."""
        raw = gallery_document_factory([[None, ["i1", "i2"]], [["i3"]]])

        listings = parse_gallery_document(raw)

        assert len(listings) == 2
        assert listings[0].children[0].gallery_items is None
        assert listings[0].children[1].gallery_items == [GalleryItem("i1"), GalleryItem("i2")]
        assert listings[1].children[0].gallery_items == [GalleryItem("i3")]

    def test_missing_fields_are_skipped(self):
        """Missing or mistyped optional fields decode as absent."""
        raw = [
            {"kind": "Listing"},
            {"data": {"children": "nope"}},
            {"data": {"children": [
                {},
                {"data": None},
                {"data": {"gallery_data": None}},
                {"data": {"gallery_data": {"items": None}}},
                {"data": {"gallery_data": {"items": [{"id": 1}, {"media_id": 7}, {"media_id": "ok"}]}}},
            ]}},
            "garbage",
        ]

        listings = parse_gallery_document(raw)

        assert [len(l.children) for l in listings] == [0, 0, 5, 0]
        assert [c.gallery_items for c in listings[2].children[:4]] == [None, None, None, None]
        assert listings[2].children[4].gallery_items == [GalleryItem("ok")]

    @pytest.mark.parametrize("raw", [{}, None, "[]", 3])
    def test_non_list_document_is_an_error(self, raw):
        """Only the top level must be a list."""
        with pytest.raises(GalleryFetchError):
            parse_gallery_document(raw)


# =============================================================================
# Link Extraction Tests
# =============================================================================

class TestExtractImageLinks:
    """Tests for extract_image_links."""

    def test_traversal_order(self):
        """Links follow listing, child, item order."""
        listings = [
            GalleryListing(children=[
                GalleryChild(),
                GalleryChild(gallery_items=[GalleryItem("i1"), GalleryItem("i2")]),
            ]),
            GalleryListing(children=[GalleryChild(gallery_items=[GalleryItem("i3")])]),
        ]

        links = extract_image_links(listings, "https://i.redd.it/{media_id}.jpg")

        assert links == [
            "https://i.redd.it/i1.jpg",
            "https://i.redd.it/i2.jpg",
            "https://i.redd.it/i3.jpg",
        ]

    def test_duplicates_are_kept(self):
        """The same media id twice gives the same link twice."""
        listings = [GalleryListing(children=[GalleryChild(gallery_items=[GalleryItem("a"), GalleryItem("a")])])]

        assert extract_image_links(listings, "https://img.host/{media_id}.jpg") == [
            "https://img.host/a.jpg",
            "https://img.host/a.jpg",
        ]

    def test_no_items_gives_empty_list(self):
        """A document without gallery items yields no links."""
        assert extract_image_links([GalleryListing(children=[GalleryChild()])]) == []
        assert extract_image_links([]) == []


# =============================================================================
# Resolver Tests
# =============================================================================

class TestGalleryResolver:
    """Tests for GalleryResolver.resolve."""

    def test_resolve_fetches_by_gallery_id(self, fake_client_factory, gallery_document_factory):
        """The gallery id from the link is the lookup key."""
        client = fake_client_factory(galleries={
            "abc123": gallery_document_factory([[None, ["i1", "i2"]], [["i3"]]]),
        })
        resolver = GalleryResolver(client)

        links = asyncio.run(resolver.resolve("https://www.reddit.com/gallery/abc123"))

        assert client.gallery_calls == ["abc123"]
        assert links == [
            "https://i.redd.it/i1.jpg",
            "https://i.redd.it/i2.jpg",
            "https://i.redd.it/i3.jpg",
        ]

    def test_resolve_empty_gallery(self, fake_client_factory, gallery_document_factory):
        """A gallery with no items resolves to an empty list."""
        client = fake_client_factory(galleries={"empty": gallery_document_factory([[None], []])})
        resolver = GalleryResolver(client)

        assert asyncio.run(resolver.resolve("https://www.reddit.com/gallery/empty")) == []

    def test_resolve_custom_host(self, fake_client_factory, gallery_document_factory):
        """Custom gallery prefix and image template are honoured."""
        client = fake_client_factory(galleries={"xyz": gallery_document_factory([[["m1"]]])})
        resolver = GalleryResolver(
            client,
            classifier=LinkClassifier(direct_image_prefixes=["https://img.host/"], gallery_prefix="https://site/gallery"),
            url_template="https://img.host/{media_id}.jpg"
        )

        assert asyncio.run(resolver.resolve("https://site/gallery/xyz")) == ["https://img.host/m1.jpg"]

    @pytest.mark.parametrize("url", [
        "https://i.redd.it/abc.jpg",
        "https://www.reddit.com/gallery/",
        "",
    ])
    def test_resolve_rejects_non_gallery_links(self, fake_client_factory, url):
        """Non-gallery links raise MalformedGalleryUrlError without fetching."""
        client = fake_client_factory()
        resolver = GalleryResolver(client)

        with pytest.raises(MalformedGalleryUrlError):
            asyncio.run(resolver.resolve(url))
        assert client.gallery_calls == []

    def test_resolve_propagates_fetch_errors(self, fake_client_factory):
        """Fetch failures surface as GalleryFetchError."""
        client = fake_client_factory(galleries={"bad": GalleryFetchError("boom")})
        resolver = GalleryResolver(client)

        with pytest.raises(GalleryFetchError):
            asyncio.run(resolver.resolve("https://www.reddit.com/gallery/bad"))

    def test_resolve_rejects_bad_document_shape(self, fake_client_factory):
        """A document that is not a list is a GalleryFetchError."""
        client = fake_client_factory(galleries={"odd": {"data": {}}})
        resolver = GalleryResolver(client)

        with pytest.raises(GalleryFetchError):
            asyncio.run(resolver.resolve("https://www.reddit.com/gallery/odd"))
