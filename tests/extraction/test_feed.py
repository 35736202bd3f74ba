# ABOUTME: Tests for the homepage feed builder and its magnitude parser
# ABOUTME: Uses a trimmed copy of the forum homepage markup, no network access

import pytest

from minebbs_scout.config import Config
from minebbs_scout.extraction.feed import (
    DEFAULT_CATEGORY_NAME,
    build_feed,
    extract_latest_topics,
    extract_notices,
    extract_statistics,
    fault_isolated,
    parse_magnitude,
)
from minebbs_scout.extraction.html import parse
from minebbs_scout.models.feed import FeedBundle

ORIGIN = "https://www.minebbs.com"

NOTICE_BLOCK = """
  <div class="notices notices--block">
    <a href="/threads/rules.1/">社区规则</a>
    <a href="https://www.minebbs.com/threads/event.2/">夏季活动</a>
  </div>
"""

HOMEPAGE = """<!DOCTYPE html>
<html lang="zh-CN" data-logged-in="true">
<head><title>MineBBS</title></head>
<body>
<div class="p-navgroup">
  <a class="p-navgroup-link p-navgroup-link--user" href="/account/">
    <span class="p-navgroup-linkText">Steve</span>
  </a>
</div>
{notices}
<div data-widget-key="forum_slide">
  <div class="swiper-wrapper">
    <div class="swiper-slide"><a href="/threads/slide.10/"><img src="/data/slides/1.png"></a></div>
    <div class="swiper-slide"><img src="https://cdn.minebbs.com/slides/2.png"></div>
    <div class="swiper-slide"><a href="/apply/"><img src="/styles/apply_button.png"></a></div>
  </div>
</div>
<div data-widget-key="featured_content">
  <div class="carousel-item">
    <div class="contentRow">
      <div class="contentRow-figure"><img src="/data/avatars/s/1/1.jpg"></div>
      <div class="contentRow-main">
        <h4 class="contentRow-title"><a href="/resources/skyblock.100/">空岛生存</a></h4>
        <a class="username" href="/members/alex.5/">Alex</a>
        <time class="u-dt" data-date="2024-05-01">5月1日</time>
        <div class="contentRow-lesser">  A floating island map  </div>
      </div>
    </div>
  </div>
  <div class="carousel-item">
    <div class="contentRow">
      <div class="contentRow-main">
        <h4 class="contentRow-title"><a href="/resources/nobody.101/">无作者</a></h4>
      </div>
    </div>
  </div>
  <div class="carousel-item">
    <div class="contentRow">
      <div class="contentRow-figure"><img src=""></div>
      <div class="contentRow-main">
        <h4 class="contentRow-title"><a href="/resources/plugin.102/">插件</a></h4>
        <a class="username" href="/members/herobrine.6/">Herobrine</a>
        <time class="u-dt">昨天</time>
      </div>
    </div>
  </div>
</div>
<div class="block block--category block--category1">
  <div class="block-container">
    <h2 class="block-header"><a href="/categories/java.1/">Java版</a></h2>
    <div class="block-body">
      <div class="node node--forum node--id2">
        <div class="node-main">
          <h3 class="node-title"><a href="/forums/java-resources.2/">资源</a></h3>
          <div class="node-description">Java版资源分享</div>
        </div>
        <div class="node-stats">
          <dl class="pairs pairs--rows"><dt>主题</dt><dd>1.2K</dd></dl>
          <dl class="pairs pairs--rows"><dt>消息</dt><dd>45</dd></dl>
        </div>
        <div class="node-extra">
          <a class="node-extra-title" href="/threads/latest.3/">最新的帖子</a>
        </div>
      </div>
      <div class="node node--forum node--id3">
        <div class="node-main">
          <h3 class="node-title"><a href="/forums/java-help.3/">求助</a></h3>
        </div>
        <div class="node-stats">
          <dl class="pairs pairs--rows"><dt>主题</dt><dd>abc</dd></dl>
          <dl class="pairs pairs--rows"><dt>消息</dt><dd>3M</dd></dl>
        </div>
      </div>
    </div>
  </div>
</div>
<div class="block block--category block--category2">
  <div class="block-container">
    <div class="block-body">
      <div class="node node--forum node--id4">
        <h3 class="node-title"><a href="/forums/misc.4/">杂谈</a></h3>
      </div>
    </div>
  </div>
</div>
<div class="block block--category block--category3">
  <div class="block-container">
    <h2 class="block-header"><a href="/categories/empty.5/">空分区</a></h2>
    <div class="block-body"></div>
  </div>
</div>
<div class="structItemContainer">
  <div class="structItem structItem--thread">
    <div class="structItem-cell structItem-cell--main">
      <div class="structItem-title"><a href="/threads/hello.20/">你好</a></div>
      <a class="username" href="/members/steve.1/">Steve</a>
      <time data-date="2024-06-01">6月1日</time>
    </div>
    <div class="structItem-cell structItem-cell--meta">
      <dl class="pairs pairs--justified"><dt>回复</dt><dd>1,024</dd></dl>
      <dl class="pairs pairs--justified"><dt>查看</dt><dd>2.5K</dd></dl>
    </div>
  </div>
  <div class="structItem structItem--thread">
    <div class="structItem-cell structItem-cell--main">
      <div class="structItem-title"><a href="/threads/bye.21/">再见</a></div>
    </div>
  </div>
</div>
<div data-widget-key="forum_overview_forum_statistics">
  <div class="block-body">
    <dl class="pairs pairs--justified"><dt>主题</dt><dd>12,345</dd></dl>
    <dl class="pairs pairs--justified"><dt>消息</dt><dd>678,901</dd></dl>
    <dl class="pairs pairs--justified"><dt>会员</dt><dd>23,456</dd></dl>
  </div>
</div>
<div data-widget-key="forum_overview_members_online">
  <div class="block-body">
    <dl class="pairs pairs--justified"><dt>在线</dt><dd>321</dd></dl>
  </div>
</div>
</body>
</html>
"""


def _page(notices: str = NOTICE_BLOCK) -> bytes:
    return HOMEPAGE.format(notices=notices).encode("utf-8")


@pytest.fixture
def config():
    return Config(_env_file=None)


@pytest.fixture
def bundle(config) -> FeedBundle:
    return build_feed(parse(_page(), ORIGIN), config)


class TestParseMagnitude:
    """Human-readable counts from forum markup"""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("1.2K", 1200),
            ("1.2k", 1200),
            ("45", 45),
            ("3M", 3_000_000),
            ("1,024", 1024),
            (" 7 ", 7),
            ("abc", 0),
            ("", 0),
            (None, 0),
            ("-5", 0),
            ("1.2.3K", 0),
        ],
    )
    def test_parse_magnitude(self, value, expected):
        assert parse_magnitude(value) == expected


class TestBuildFeed:
    """Projection of a full homepage"""

    def test_notices(self, bundle):
        assert [notice.title for notice in bundle.notices] == ["社区规则", "夏季活动"]
        assert bundle.notices[0].link == "https://www.minebbs.com/threads/rules.1/"
        assert bundle.notices[1].link == "https://www.minebbs.com/threads/event.2/"

    def test_banners_skip_apply_button(self, bundle):
        assert len(bundle.banners) == 2
        assert bundle.banners[0].image_url == "https://www.minebbs.com/data/slides/1.png"
        assert bundle.banners[0].link == "https://www.minebbs.com/threads/slide.10/"
        assert bundle.banners[1].image_url == "https://cdn.minebbs.com/slides/2.png"
        assert bundle.banners[1].link == ""

    def test_featured_requires_author(self, bundle, config):
        assert [item.title for item in bundle.featured] == ["空岛生存", "插件"]

        first = bundle.featured[0]
        assert first.author_name == "Alex"
        assert first.publish_time == "2024-05-01"
        assert first.summary == "A floating island map"
        assert first.author_avatar == "https://www.minebbs.com/data/avatars/s/1/1.jpg"
        assert first.link == "https://www.minebbs.com/resources/skyblock.100/"

        second = bundle.featured[1]
        assert second.publish_time == "昨天"
        assert second.author_avatar == config.default_avatar

    def test_categories(self, bundle):
        names = [category.category_name for category in bundle.categories]
        # The category without forums is dropped
        assert names == ["Java版", DEFAULT_CATEGORY_NAME]

        resources, help_forum = bundle.categories[0].forums
        assert resources.forum_name == "资源"
        assert resources.forum_desc == "Java版资源分享"
        assert resources.topic_count == 1200
        assert resources.msg_count == 45
        assert resources.latest_topic_title == "最新的帖子"
        assert resources.link == "https://www.minebbs.com/forums/java-resources.2/"

        assert help_forum.topic_count == 0
        assert help_forum.msg_count == 3_000_000
        assert help_forum.latest_topic_title == ""
        assert bundle.forum_count == 3

    def test_latest_topics(self, bundle):
        assert len(bundle.latest_topics) == 2
        topic = bundle.latest_topics[0]
        assert topic.title == "你好"
        assert topic.author_name == "Steve"
        assert topic.publish_time == "2024-06-01"
        assert topic.reply_count == 1024
        assert topic.view_count == 2500
        assert topic.link == "https://www.minebbs.com/threads/hello.20/"

        bare = bundle.latest_topics[1]
        assert bare.author_name == ""
        assert bare.reply_count == 0
        assert bare.view_count == 0

    def test_statistics(self, bundle):
        assert bundle.stats == {
            "online": "321",
            "topics": "12,345",
            "messages": "678,901",
            "members": "23,456",
        }

    def test_statistic_missing_from_widget_ignores_forum_counts(self, config):
        markup = """<html><body>
        <div class="block block--category">
          <div class="block-body">
            <dl class="pairs"><dt>主题</dt><dd>1.2K</dd></dl>
            <dl class="pairs"><dt>消息</dt><dd>45</dd></dl>
          </div>
        </div>
        <div data-widget-key="forum_overview_forum_statistics">
          <div class="block-body">
            <dl class="pairs"><dt>主题</dt><dd>12,345</dd></dl>
          </div>
        </div>
        </body></html>"""

        stats = extract_statistics(parse(markup, ORIGIN), config)

        assert stats["topics"] == "12,345"
        assert stats["messages"] == "0"

    def test_statistics_from_bare_block_body(self, config):
        markup = '<div class="block-body"><dl><dt>会员</dt><dd>7</dd></dl></div>'

        assert extract_statistics(parse(markup, ORIGIN), config)["members"] == "7"

    def test_login_state(self, bundle):
        assert bundle.session.logged_in is True
        assert bundle.session.username == "Steve"

    def test_missing_notice_block(self, config):
        bundle = build_feed(parse(_page(notices=""), ORIGIN), config)

        assert bundle.notices == ()
        assert len(bundle.banners) == 2
        assert len(bundle.featured) == 2
        assert len(bundle.categories) == 2
        assert len(bundle.latest_topics) == 2
        assert bundle.stats["members"] == "23,456"
        assert bundle.session.logged_in is True

    def test_idempotent(self, config):
        raw = _page()
        first = build_feed(parse(raw, ORIGIN), config)
        second = build_feed(parse(raw, ORIGIN), config)
        assert first == second
        assert first.model_dump() == second.model_dump()

    def test_unrelated_document_gives_empty_bundle(self, config):
        bundle = build_feed(parse(b"<p>maintenance</p>", ORIGIN), config)

        assert bundle.notices == ()
        assert bundle.categories == ()
        assert bundle.stats == {"online": "0", "topics": "0", "messages": "0", "members": "0"}
        assert bundle.session.logged_in is False
        assert bundle.session.username == ""


class TestLimits:
    """Configured caps on notices and topics"""

    def test_notice_limit_applies_before_empty_titles(self):
        markup = """<div class="notice">
            <a href="/a/"> </a><a href="/b/">B</a><a href="/c/">C</a><a href="/d/">D</a>
        </div>"""
        notices = extract_notices(parse(markup, ORIGIN), Config(_env_file=None, notice_limit=3))
        assert [notice.title for notice in notices] == ["B", "C"]

    def test_topic_limit(self, config):
        tree = parse(_page(), ORIGIN)
        topics = extract_latest_topics(tree, Config(_env_file=None, topic_limit=1))
        assert len(topics) == 1


class TestFaultIsolation:
    """A failing routine contributes its default instead of aborting"""

    def test_routine_failure_returns_default(self):
        @fault_isolated(tuple)
        def broken(tree, config):
            raise AttributeError("block vanished")

        assert broken(None, None) == ()

    def test_statistics_default_on_failure(self, config):
        # A tree that is not a DocumentTree breaks the selector call
        assert extract_statistics(object(), config) == {
            "online": "0",
            "topics": "0",
            "messages": "0",
            "members": "0",
        }
