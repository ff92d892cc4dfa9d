import asyncio
from types import ModuleType

from stealstickers.adapters.module_registry import ModuleScanRegistry
from stealstickers.adapters.notifier import LoggingNotifier
from stealstickers.adapters.patcher import Patcher
from stealstickers.config import Settings
from stealstickers.main import StealStickersPlugin, build_default_plugin


class RecordingSink:
    def __init__(self) -> None:
        self.saved: list[tuple[str, str]] = []

    async def save(self, url: str, filename: str) -> None:
        self.saved.append((url, filename))


def _host_actions_module() -> ModuleType:
    module = ModuleType("host.message_actions")

    def getActions(props):
        return {"props": {"children": [{"props": {"options": [{"label": "Reply"}]}}]}}

    module.markAsUnread = lambda: None
    module.suppressEmbeds = lambda: None
    module.getActions = getActions
    return module


def _plugin(module: ModuleType, sink=None) -> tuple[StealStickersPlugin, LoggingNotifier]:
    notifier = LoggingNotifier()
    plugin = StealStickersPlugin(
        registry=ModuleScanRegistry({module.__name__: module}),
        patcher=Patcher(),
        notifier=notifier,
        sink=sink,
        settings=Settings(),
    )
    return plugin, notifier


def test_sticker_menu_gets_download_action() -> None:
    module = _host_actions_module()
    original = module.getActions
    sink = RecordingSink()
    plugin, notifier = _plugin(module, sink)

    async def scenario() -> None:
        plugin.on_load()
        menu = module.getActions(
            {"message": {"id": "m1", "stickerItems": [{"id": "999", "name": "Pug", "format_type": 4}]}}
        )
        options = menu["props"]["children"][0]["props"]["options"]
        assert [getattr(o, "label", None) or o["label"] for o in options] == [
            "Reply",
            "📥 Download Sticker",
        ]

        options[-1].on_activate()
        await plugin.dispatcher.wait_idle()

        plain = module.getActions({"message": {"id": "m2", "content": "hello"}})
        assert len(plain["props"]["children"][0]["props"]["options"]) == 1

        plugin.on_unload()

    asyncio.run(scenario())

    assert sink.saved == [("https://cdn.discordapp.com/stickers/999.gif", "Pug_999.gif")]
    assert list(notifier.history) == [("Downloaded Pug! 📥", None)]
    assert module.getActions is original


def test_load_without_host_modules_then_unload_twice() -> None:
    plugin, _ = _plugin(ModuleType("host.unrelated"))
    plugin.on_load()
    assert plugin.controller.active
    assert plugin.controller.handles == ()
    plugin.on_unload()
    plugin.on_unload()
    assert not plugin.controller.active


def test_settings_drive_splice_depth() -> None:
    module = ModuleType("host.deep_actions")
    options: list = []
    module.markAsUnread = lambda: None
    module.suppressEmbeds = lambda: None
    module.getActions = lambda props: {"children": [{"children": [{"options": options}]}]}

    plugin = StealStickersPlugin(
        registry=ModuleScanRegistry({module.__name__: module}),
        patcher=Patcher(),
        notifier=LoggingNotifier(),
        settings=Settings(splice_max_depth=1),
    )
    plugin.on_load()
    module.getActions({"stickers": [{"id": "1", "format_type": 1}]})
    assert options == []
    plugin.on_unload()


def test_build_default_plugin_reads_settings(tmp_path) -> None:
    settings = Settings(download_dir=str(tmp_path), browser_fallback=False, log_level="debug")
    plugin = build_default_plugin(settings)
    assert plugin.settings is settings
    assert plugin.downloader._url_opener is None


def test_tap_outside_event_loop_does_not_reach_host() -> None:
    module = _host_actions_module()
    sink = RecordingSink()
    plugin, notifier = _plugin(module, sink)
    plugin.on_load()

    menu = module.getActions({"sticker": {"id": "5", "name": "Cat", "format_type": 1}})
    entry = menu["props"]["children"][0]["props"]["options"][-1]
    entry.on_activate()
    plugin.on_unload()

    assert sink.saved == []
    assert [severity for _, severity in notifier.history] == ["error"]
