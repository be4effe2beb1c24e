"""
結果快取測試
"""
import threading

from airis_codegen.cache import ResultCache, generate_key
from airis_codegen.config import GenerationOptions, MarkupDialect
from airis_codegen.integrator import CustomFragments
from airis_codegen.scene_graph import SceneNode
from airis_codegen.tables import ClassifierTables, EngineTables


def _node(name="Card"):
    return SceneNode(id="1:1", name=name)


# ─── generate_key ────────────────────────────────────────────────────────────

class TestGenerateKey:
    def test_deterministic(self):
        a = generate_key("component", _node(), GenerationOptions(), "0.1.0")
        b = generate_key("component", _node(), GenerationOptions(), "0.1.0")
        assert a == b
        assert len(a) == 64

    def test_options_change_key(self):
        react = generate_key("component", _node(), GenerationOptions(), "0.1.0")
        vue = generate_key("component", _node(), GenerationOptions(markup=MarkupDialect.TEMPLATED), "0.1.0")
        assert react != vue

    def test_node_content_changes_key(self):
        a = generate_key("component", _node("Card"), GenerationOptions(), "0.1.0")
        b = generate_key("component", _node("Panel"), GenerationOptions(), "0.1.0")
        assert a != b

    def test_version_and_scope_change_key(self):
        base = generate_key("component", _node(), GenerationOptions(), "0.1.0")
        assert base != generate_key("component", _node(), GenerationOptions(), "0.2.0")
        assert base != generate_key("audit", _node(), GenerationOptions(), "0.1.0")

    def test_fragments_change_key(self):
        base = generate_key("component", _node(), GenerationOptions(), "0.1.0")
        custom = generate_key("component", _node(), GenerationOptions(), "0.1.0",
                              CustomFragments(stylesheet=".a {}"))
        assert base != custom

    def test_engine_settings_change_key(self):
        default = generate_key("component", _node(), GenerationOptions(), "0.1.0",
                               engine={"tables": EngineTables()})
        tables = EngineTables(classifier=ClassifierTables(category_keywords=[("layout", ["card"])]))
        custom = generate_key("component", _node(), GenerationOptions(), "0.1.0",
                              engine={"tables": tables})
        assert default != custom
        assert default == generate_key("component", _node(), GenerationOptions(), "0.1.0",
                                       engine={"tables": EngineTables()})



# ─── ResultCache ─────────────────────────────────────────────────────────────

class TestResultCache:
    def setup_method(self):
        self.cache = ResultCache()

    def test_get_set_has(self):
        assert self.cache.get("k") is None
        self.cache.set("k", "value")
        assert self.cache.has("k")
        assert self.cache.get("k") == "value"
        assert len(self.cache) == 1

    def test_stats(self):
        self.cache.get("missing")
        self.cache.set("k", 1)
        self.cache.get("k")
        self.cache.get("k")
        assert self.cache.stats() == {"hits": 2, "misses": 1, "size": 1}

    def test_clear_resets(self):
        self.cache.set("k", 1)
        self.cache.get("k")
        self.cache.clear()
        assert len(self.cache) == 0
        assert self.cache.stats() == {"hits": 0, "misses": 0, "size": 0}

    def test_replace_whole_value(self):
        self.cache.set("k", {"v": 1})
        self.cache.set("k", {"v": 2})
        assert self.cache.get("k") == {"v": 2}

    def test_concurrent_set(self):
        """多執行緒同時寫入：每個 key 都是完整寫入的值"""
        def worker(n):
            for i in range(200):
                self.cache.set(f"key-{i}", (n, i))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(self.cache) == 200
        for i in range(200):
            n, stored = self.cache.get(f"key-{i}")
            assert stored == i
            assert 0 <= n < 8
