import asyncio


DELAY = 0.01
SETTLE = 0.05


class TestSearchSession:
    def test_generations_increase(self):
        from relevance.search import SearchSession

        session = SearchSession()

        assert session.next_generation() == 1
        assert session.next_generation() == 2
        assert session.is_current(2)
        assert not session.is_current(1)

    def test_invalidate(self):
        from relevance.search import SearchSession

        session = SearchSession()
        gen = session.next_generation()
        session.invalidate()

        assert not session.is_current(gen)
        assert session.next_generation() == gen + 1


class TestDebouncedSearch:
    def test_debounce_collapses_keystrokes(self):
        from relevance.search import DebouncedSearch, SearchState

        calls = []
        published = []

        def evaluate(query):
            calls.append(query)
            return [query]

        async def run():
            search = DebouncedSearch(evaluate, lambda r, g: published.append((r, g)), delay_s=DELAY)
            for text in ["n", "nv", "nvi", "NVIDIA!"]:
                search.update(text)
            assert search.state == SearchState.PENDING
            assert search.busy is True
            await search.drain()
            return search

        search = asyncio.run(run())

        assert calls == ["nvidia"]
        assert published == [(["nvidia"], 1)]
        assert search.state == SearchState.RESOLVED
        assert search.busy is False

    def test_out_of_order_completion_keeps_newest(self):
        from relevance.search import DebouncedSearch, SearchState

        published = []

        async def run():
            gates = {}

            async def evaluate(query):
                fut = asyncio.get_running_loop().create_future()
                gates[query] = fut
                return await fut

            search = DebouncedSearch(evaluate, lambda r, g: published.append((r, g)), delay_s=DELAY)

            search.update("first")
            await asyncio.sleep(SETTLE)
            assert search.state == SearchState.IN_FLIGHT

            search.update("second")
            await asyncio.sleep(SETTLE)
            assert set(gates) == {"first", "second"}

            gates["second"].set_result(["second-result"])
            await asyncio.sleep(SETTLE)
            assert published == [(["second-result"], 2)]

            gates["first"].set_result(["first-result"])
            await search.drain()
            return search

        search = asyncio.run(run())

        assert published == [(["second-result"], 2)]
        assert search.results == ["second-result"]
        assert search.session.published == 2
        assert search.busy is False

    def test_newer_keystroke_supersedes_in_flight(self):
        from relevance.search import DebouncedSearch

        published = []

        async def run():
            gates = {}

            async def evaluate(query):
                fut = asyncio.get_running_loop().create_future()
                gates[query] = fut
                return await fut

            search = DebouncedSearch(evaluate, lambda r, g: published.append((r, g)), delay_s=DELAY)
            search.update("first")
            await asyncio.sleep(SETTLE)

            # typed again; the first result arrives before the new timer fires
            search.update("second")
            gates["first"].set_result(["first-result"])
            await asyncio.sleep(0)
            assert search.busy is True

            await asyncio.sleep(SETTLE)
            gates["second"].set_result(["second-result"])
            await search.drain()

        asyncio.run(run())

        assert published == [(["second-result"], 2)]

    def test_failure_publishes_empty_with_notice(self):
        from relevance.search import DebouncedSearch

        published = []
        events = []

        async def evaluate(query):
            raise RuntimeError("remote down")

        async def run():
            search = DebouncedSearch(
                evaluate,
                lambda r, g: published.append((r, g)),
                delay_s=DELAY,
                on_event=events.append,
            )
            search.update("nvidia")
            await search.drain()
            return search

        search = asyncio.run(run())

        assert published == [([], 1)]
        assert search.busy is False
        failures = [e for e in events if e.type == "search_failed"]
        assert len(failures) == 1
        assert failures[0].generation == 1
        assert "remote down" in failures[0].data["error"]

    def test_late_failure_does_not_overwrite(self):
        from relevance.search import DebouncedSearch

        published = []
        events = []

        async def run():
            gates = {}

            async def evaluate(query):
                fut = asyncio.get_running_loop().create_future()
                gates[query] = fut
                return await fut

            search = DebouncedSearch(
                evaluate,
                lambda r, g: published.append((r, g)),
                delay_s=DELAY,
                on_event=events.append,
            )
            search.update("first")
            await asyncio.sleep(SETTLE)
            search.update("second")
            await asyncio.sleep(SETTLE)

            gates["second"].set_result(["ok"])
            await asyncio.sleep(SETTLE)
            gates["first"].set_exception(RuntimeError("late"))
            await search.drain()
            return search

        search = asyncio.run(run())

        assert published == [(["ok"], 2)]
        assert search.results == ["ok"]
        assert not [e for e in events if e.type == "search_failed"]

    def test_callback_errors_are_logged(self, caplog):
        import logging

        from relevance.search import DebouncedSearch, SearchState

        def on_resolved(results, generation):
            raise ValueError("render failed")

        def on_busy_change(busy):
            raise ValueError("spinner failed")

        async def run():
            gate = asyncio.get_running_loop().create_future()

            async def evaluate(query):
                return await gate

            search = DebouncedSearch(
                evaluate,
                on_resolved,
                delay_s=DELAY,
                on_busy_change=on_busy_change,
            )
            search.update("nvidia")
            await asyncio.sleep(SETTLE)
            tasks = list(search._inflight)
            assert len(tasks) == 1

            gate.set_result(["nvidia"])
            await search.drain()
            return search, tasks

        with caplog.at_level(logging.WARNING, logger="SearchGuard"):
            search, tasks = asyncio.run(run())

        assert all(t.exception() is None for t in tasks)
        assert search.state == SearchState.RESOLVED
        assert search.results == ["nvidia"]
        assert search.busy is False
        assert "render failed" in caplog.text
        assert "spinner failed" in caplog.text

    def test_clear_before_timer(self):
        from relevance.search import DebouncedSearch, SearchState

        calls = []
        busy = []

        async def run():
            search = DebouncedSearch(calls.append, delay_s=DELAY, on_busy_change=busy.append)
            search.update("abc")
            search.update("   ")
            await asyncio.sleep(SETTLE)
            return search

        search = asyncio.run(run())

        assert calls == []
        assert search.state == SearchState.IDLE
        assert search.results == []
        assert busy == [True, False]

    def test_clear_discards_in_flight(self):
        from relevance.search import DebouncedSearch, SearchState

        published = []

        async def run():
            gates = {}

            async def evaluate(query):
                fut = asyncio.get_running_loop().create_future()
                gates[query] = fut
                return await fut

            search = DebouncedSearch(evaluate, lambda r, g: published.append((r, g)), delay_s=DELAY)
            search.update("abc")
            await asyncio.sleep(SETTLE)
            search.update("")
            gates["abc"].set_result(["late"])
            await search.drain()
            return search

        search = asyncio.run(run())

        assert published == []
        assert search.state == SearchState.IDLE
        assert search.busy is False

    def test_reset_drops_session(self):
        from relevance.search import DebouncedSearch

        published = []

        async def run():
            gates = {}

            async def evaluate(query):
                fut = asyncio.get_running_loop().create_future()
                gates[query] = fut
                return await fut

            search = DebouncedSearch(evaluate, lambda r, g: published.append((r, g)), delay_s=DELAY)
            search.update("abc")
            await asyncio.sleep(SETTLE)
            old_session = search.session
            search.reset()

            search.update("xyz")
            await asyncio.sleep(SETTLE)
            gates["abc"].set_result(["stale"])
            gates["xyz"].set_result(["fresh"])
            await search.drain()
            return search, old_session

        search, old_session = asyncio.run(run())

        assert search.session is not old_session
        # both evaluations carry generation 1, only the new session's publishes
        assert published == [(["fresh"], 1)]

    def test_independent_boxes(self):
        from relevance.search import DebouncedSearch

        async def run():
            accounts = DebouncedSearch(lambda q: [q], delay_s=DELAY)
            posts = DebouncedSearch(lambda q: [q], delay_s=DELAY)
            accounts.update("a")
            await accounts.drain()
            accounts.update("ab")
            await accounts.drain()
            posts.update("p")
            await posts.drain()
            return accounts, posts

        accounts, posts = asyncio.run(run())

        assert accounts.session.published == 2
        assert posts.session.published == 1

    def test_local_ranked_evaluator(self):
        from relevance.search import AccountCandidate, DebouncedSearch, account_ranker, ranked_evaluator

        jack = AccountCandidate(id="1", bsky_identifier="", twitter_usernames=("nvidianetworkng",), owner="jack")
        jill = AccountCandidate(id="2", bsky_identifier="", twitter_usernames=("nvidia_news",), owner="jill")
        published = []

        async def run():
            search = DebouncedSearch(
                ranked_evaluator(account_ranker, lambda: [jack, jill]),
                lambda r, g: published.append(r),
                delay_s=DELAY,
            )
            search.update("nvidia")
            await search.drain()

        asyncio.run(run())

        assert published == [[jill, jack]]
