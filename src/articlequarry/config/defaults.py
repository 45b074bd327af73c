"""
Default regex vocabularies used to classify class names and ids.

These are plain strings so they can be overridden from YAML or the
environment; they are compiled case-insensitively with find semantics.
"""

UNLIKELY = (
    "com(bx|ment|munity)|dis(qus|cuss)|e(xtra|[-]?mail)|foot|"
    "header|menu|re(mark|ply)|rss|sh(are|outbox)|sponsor"
    "a(d|ll|gegate|rchive|ttachment)|(pag(er|ination))|popup|print|"
    "login|si(debar|gn|ngle)"
)

POSITIVE = (
    "(^(body|content|h?entry|main|page|post|text|blog|story|haupt))"
    "|arti(cle|kel)|instapaper_body|storybody|short-story|storycontent|articletext|story-primary"
    "|^newsContent$|dcontainer|announcement-details"
)

HIGHLY_POSITIVE = (
    "news-content|news-detail-content|news-release-detail|storybody|main-content|articlebody|"
    "article_body|article-body|html-view-content|entry__body|^main-article$|^article__content$|"
    "^articleContent$|^mainEntityOfPage$|art_body_article|^article_text$|main-article-chapter|post-body"
)

NEGATIVE = (
    "nav($|igation)|user|com(ment|bx)|(^com-)|contact|"
    "foot|masthead|(me(dia|ta))|outbrain|promo|related|scroll|(sho(utbox|pping))|"
    "sidebar|sponsor|tags|tool|widget|player|disclaimer|toc|infobox|vcard|title|truncate|slider|"
    "^sectioncolumns$|ad-container"
)

HIGHLY_NEGATIVE = "policy-blk|followlinkedinsignin|^signupbox$"

TO_REMOVE = (
    "feedback-prompt|story-footer|story-meta-footer|related-combined-coverage|visuallyhidden|ad_topjobs|"
    "slideshow-overlay__data|next-post-thumbnails|video-desc|related-links|^widget popular$|"
    "^widget marketplace$|^widget ad panel$|slideshowOverlay|^share-twitter$|^share-facebook$|"
    "^share-google-plus-1$|^inline-list tags$|^tag_title$|article_meta comments|^related-news$|"
    "^recomended$|^news_preview$|related--galleries|image-copyright--copyright|^credits$|^photocredit$|"
    "^morefromcategory$|^pag-photo-credit$|gallery-viewport-credit|^image-credit$|story-secondary$|"
    "carousel-body|slider_container|widget_stories|post-thumbs|^custom-share-links|socialTools|"
    "trendingStories|^metaArticleData$|jcarousel-container|module-video-slider|jcarousel-skin-tango|"
    "^most-read-content$|^commentBox$|^faqModal$|^widget-area|login-panel|^copyright$|relatedSidebar|"
    "shareFooterCntr|most-read-container|email-signup|outbrain|^wnStoryBodyGraphic|"
    "articleadditionalcontent|most-popular|shatner-box|form-errors|theme-summary|story-supplement|"
    "global-magazine-recent|nocontent|hidden-print|externallinks"
)

NEGATIVE_STYLE = "hidden|display: ?none|font-size: ?small"

KEEP_SELECTOR = "p, ol, em, ul, li, small, blockquote"
MIN_FIRST_PARAGRAPH_LENGTH = 50
MIN_PARAGRAPH_LENGTH = 30
