"""
Unit tests for lead image selection.
"""

from __future__ import annotations

from articlequarry.extractor.images import determine_image_source, is_ad_image


class TestImageSource:
    def test_largest_described_image_wins(self, fragment):
        soup = fragment(
            "<div>"
            '<img src="/icon.png" width="16" height="16">'
            '<img src="/lead.jpg" width="640" height="480" alt="A long description of the lead photograph here">'
            "</div>"
        )
        best, candidates = determine_image_source(soup.div, base_url="https://example.com/story")
        assert best is not None and best["src"] == "/lead.jpg"
        assert candidates[0].url == "https://example.com/lead.jpg"
        assert candidates[0].weight == 60
        assert candidates[-1].weight == -40
        assert [c.weight for c in candidates] == sorted((c.weight for c in candidates), reverse=True)

    def test_later_images_count_half_after_a_new_maximum(self, fragment):
        soup = fragment('<div><img src="/a.jpg" width="100"><img src="/b.jpg" width="100" height="100"></div>')
        best, candidates = determine_image_source(soup.div)
        assert best is not None and best["src"] == "/a.jpg"
        assert [c.weight for c in candidates] == [20, 20]

    def test_falls_back_to_parent_images(self, fragment):
        soup = fragment('<section><img src="/p.jpg" width="300"><div><p>text</p></div></section>')
        best, _ = determine_image_source(soup.div)
        assert best is not None and best["src"] == "/p.jpg"

    def test_nofollow_penalty(self, fragment):
        soup = fragment('<div><a rel="nofollow" href="/x"><img src="/n.jpg" width="100"></a></div>')
        best, candidates = determine_image_source(soup.div)
        assert best is None
        assert candidates[0].no_follow
        assert candidates[0].weight == -20

    def test_ad_images_and_missing_src_are_skipped(self, fragment):
        soup = fragment('<div><img src="/ads/adserver.gif" width="300"><img width="300"></div>')
        assert determine_image_source(soup.div) == (None, [])

    def test_is_ad_image(self):
        assert is_ad_image("/ads/adbanner.png")
        assert not is_ad_image("/images/lead.png")
