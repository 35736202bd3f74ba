# ABOUTME: Structural queries for the forum homepage, kept in one table
# ABOUTME: CSS paths compiled once with soupsieve so markup drift is fixed in a single place

import soupsieve as sv


def path(selector: str) -> sv.SoupSieve:
    """Compile a structural query. Syntax errors surface at import time."""
    return sv.compile(selector)


# Notice bar
NOTICE_LINKS = path('div[class*="notice"] a, div[class="p-body-header"] div[class*="blockMessage"] a')

# Carousel slides
BANNER_IMAGES = path('div[data-widget-key="forum_slide"] div[class*="swiper-slide"] img:not([src*="apply_button"])')

# Featured content carousel
FEATURED_ITEMS = path('div[data-widget-key="featured_content"] div[class*="carousel-item"]')
FEATURED_TITLE = path('h4[class*="contentRow-title"] > a')
FEATURED_TIME = path('time[class*="u-dt"]')
FEATURED_SUMMARY = path('div[class*="contentRow-lesser"]')
FEATURED_AVATAR = path('div[class*="contentRow-figure"] img')
AUTHOR_LINK = path('a[class*="username"]')

# Forum categories and their nodes
CATEGORY_BLOCKS = path('div[class*="block--category"]')
CATEGORY_TITLE = path('h2[class*="block-header"] a, h3[class*="block-header"] a')
FORUM_NODES = path('div[class*="node--forum"]')
FORUM_TITLE = path('h3[class*="node-title"] > a')
FORUM_DESCRIPTION = path('div[class*="node-description"]')
FORUM_TOPIC_COUNT = path('dl[class*="pairs"]:nth-of-type(1) > dd')
FORUM_MESSAGE_COUNT = path('dl[class*="pairs"]:nth-of-type(2) > dd')
FORUM_LATEST_TOPIC = path('a[class*="node-extra-title"]')

# Latest threads list
TOPIC_ITEMS = path('div[class*="structItem--thread"]')
TOPIC_TITLE = path('div[class*="structItem-title"] a')
TOPIC_TIME = path("time")
TOPIC_REPLIES = path('dt:-soup-contains("回复") ~ dd')
TOPIC_VIEWS = path('dt:-soup-contains("查看") ~ dd')

# Board statistics, searched scope by scope
STAT_SCOPES = (
    path('div[data-widget-key*="statistics"]'),
    path('div[data-widget-key*="online"]'),
    # Forum category bodies carry per-forum counts under the same labels
    path('div[class*="block-body"]:not(div[class*="block--category"] *)'),
)
STAT_LABELS = {
    "online": "在线",
    "topics": "主题",
    "messages": "消息",
    "members": "会员",
}
STAT_VALUES = {key: path(f'dt:-soup-contains("{label}") ~ dd') for key, label in STAT_LABELS.items()}

# Visitor navigation
DOCUMENT_ROOT = path("html")
VISITOR_NAME = path('a[class*="p-navgroup-link--user"] span[class*="p-navgroup-linkText"]')
