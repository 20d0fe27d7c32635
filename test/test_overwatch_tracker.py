import asyncio
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
from aiohttp import web
from aiohttp.test_utils import TestServer as LocalServer

from app.overwatch_tracker import PROFILE_PATH, _service_url, parse_battletag, resolve_player
from app.overwatch_tracker.http_session import close_session
from app.overwatch_tracker.errors import StatLookupError, ValidationError
from app.overwatch_tracker.structures import HeroPlaytime, LookupConfig

PROFILE = {
    "username": "Tvrsier",
    "private": False,
    "competitive": {"rank": 2750},
}

STATS = {
    "username": "Tvrsier",
    "stats": {
        "top_heroes": {
            "competitive": {
                "played": [
                    {"hero": "Ana", "played": "12 hours"},
                    {"hero": "Mercy", "played": "5 hours"},
                ]
            }
        }
    },
}


class TestParseBattletag(unittest.TestCase):

    def test_valid(self):
        self.assertEqual(parse_battletag("Tvrsier#11234"), ("Tvrsier", "11234"))

    def test_malformed(self):
        for battletag in ["Tvrsier", "Tvrsier#", "#1234", "Tvrsier#12a", "Tvr#sier#12", ""]:
            with self.subTest(battletag=battletag):
                with self.assertRaises(ValidationError):
                    parse_battletag(battletag)


class TestResolvePlayer(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self.get_profile = AsyncMock(return_value=PROFILE)
        self.get_stats = AsyncMock(return_value=STATS)
        patcher_profile = patch("app.overwatch_tracker.get_profile", new=self.get_profile)
        patcher_stats = patch("app.overwatch_tracker.get_stats", new=self.get_stats)
        patcher_profile.start()
        patcher_stats.start()
        self.addCleanup(patcher_profile.stop)
        self.addCleanup(patcher_stats.stop)

    async def test_merges_profile_and_stats(self):
        summary = await resolve_player("Tvrsier#11234")

        self.assertEqual(summary.handle, "Tvrsier#11234")
        self.assertEqual(summary.name, "Tvrsier")
        self.assertEqual(summary.discriminator, "11234")
        self.assertFalse(summary.is_private)
        self.assertEqual(summary.competitive_rank, 2750)
        self.assertEqual(summary.top_heroes, (HeroPlaytime("Ana", "12 hours"), HeroPlaytime("Mercy", "5 hours")))
        self.get_profile.assert_awaited_once_with("pc", "us", "Tvrsier-11234")
        self.get_stats.assert_awaited_once_with("pc", "us", "Tvrsier-11234")

    async def test_uses_given_platform_and_region(self):
        summary = await resolve_player("Tvrsier#11234", LookupConfig(platform="psn", region="eu"))

        self.get_profile.assert_awaited_once_with("psn", "eu", "Tvrsier-11234")
        self.assertEqual((summary.platform, summary.region), ("psn", "eu"))

    async def test_private_profile_has_no_heroes(self):
        self.get_profile.return_value = {"username": "Tvrsier", "private": True, "competitive": {"rank": 3100}}

        summary = await resolve_player("Tvrsier#11234")

        self.assertTrue(summary.is_private)
        self.assertEqual(summary.top_heroes, ())

    async def test_unranked_player(self):
        self.get_profile.return_value = {"username": "Tvrsier", "private": False, "competitive": {"rank": None}}

        summary = await resolve_player("Tvrsier#11234")

        self.assertIsNone(summary.competitive_rank)
        self.assertEqual(summary.top_heroes, ())

    async def test_invalid_battletag_makes_no_request(self):
        with self.assertRaises(ValidationError):
            await resolve_player("Tvrsier")
        self.get_profile.assert_not_awaited()
        self.get_stats.assert_not_awaited()

    async def test_connection_error_becomes_lookup_error(self):
        self.get_stats.side_effect = aiohttp.ClientConnectionError("offline")

        with self.assertRaises(StatLookupError) as cm:
            await resolve_player("Tvrsier#11234")
        self.assertEqual(cm.exception.handle, "Tvrsier#11234")
        self.assertIn("Tvrsier#11234", str(cm.exception))

    async def test_http_status_becomes_lookup_error(self):
        self.get_profile.side_effect = aiohttp.ClientResponseError(MagicMock(), (), status=404, message="Not Found")

        with self.assertRaises(StatLookupError) as cm:
            await resolve_player("Tvrsier#11234")
        self.assertIn("404", str(cm.exception))

    async def test_timeout_becomes_lookup_error(self):
        self.get_profile.side_effect = asyncio.TimeoutError()

        with self.assertRaises(StatLookupError):
            await resolve_player("Tvrsier#11234")

    async def test_garbage_payload_becomes_lookup_error(self):
        self.get_stats.return_value = {"stats": {"top_heroes": {"competitive": {"played": [{"name": "Ana"}]}}}}

        with self.assertRaises(StatLookupError):
            await resolve_player("Tvrsier#11234")

    async def test_negative_rank_is_unranked(self):
        self.get_profile.return_value = {"username": "Tvrsier", "private": False, "competitive": {"rank": -40}}

        summary = await resolve_player("Tvrsier#11234")

        self.assertIsNone(summary.competitive_rank)
        self.assertEqual(summary.top_heroes, ())

    async def test_failed_query_cancels_the_other(self):
        stats_finished = asyncio.Event()

        async def slow_stats(*args):
            await asyncio.sleep(0.2)
            stats_finished.set()
            return STATS

        self.get_profile.side_effect = aiohttp.ClientConnectionError("offline")
        self.get_stats.side_effect = slow_stats

        with self.assertRaises(StatLookupError):
            await resolve_player("Tvrsier#11234")
        await asyncio.sleep(0.3)
        self.assertFalse(stats_finished.is_set(), "stats query kept running after the profile query failed")


class TestServiceUrl(unittest.TestCase):

    def test_player_id_is_quoted(self):
        url = _service_url(PROFILE_PATH, "pc", "us", "a/b?c%-12")
        self.assertTrue(url.endswith("/profile/pc/us/a%2Fb%3Fc%25-12"))


class TestStatsServiceClient(unittest.IsolatedAsyncioTestCase):
    """Runs the real client against a local server speaking the OWAPI paths."""

    async def asyncSetUp(self):
        self.requests = []
        self.stats_status = 200
        app = web.Application()
        app.router.add_get("/{tail:.*}", self._handle)
        server = LocalServer(app)
        await server.start_server()
        self.addAsyncCleanup(server.close)

        patcher = patch("app.overwatch_tracker.OW_API_URL", new=str(server.make_url("/")).rstrip("/"))
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addAsyncCleanup(close_session)

    async def _handle(self, request: web.Request) -> web.Response:
        self.requests.append(request.raw_path)
        if request.raw_path.startswith("/profile/"):
            return web.json_response(PROFILE)
        if self.stats_status != 200:
            return web.json_response({"error": "Player not found"}, status=self.stats_status)
        return web.json_response(STATS)

    async def test_queries_profile_and_stats_paths(self):
        summary = await resolve_player("Tvrsier#11234")

        self.assertEqual(summary.competitive_rank, 2750)
        self.assertEqual(summary.top_heroes[0], HeroPlaytime("Ana", "12 hours"))
        self.assertEqual(sorted(self.requests), ["/profile/pc/us/Tvrsier-11234", "/stats/pc/us/Tvrsier-11234"])

    async def test_error_status_becomes_lookup_error(self):
        self.stats_status = 404

        with self.assertRaises(StatLookupError) as cm:
            await resolve_player("Tvrsier#11234")
        self.assertIn("404", str(cm.exception))

    async def test_special_characters_stay_in_one_path_segment(self):
        await resolve_player("a/b?c%#12", LookupConfig(platform="pc", region="eu"))

        self.assertIn("/profile/pc/eu/a%2Fb%3Fc%25-12", self.requests)


if __name__ == '__main__':
    unittest.main()
