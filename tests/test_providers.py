import unittest

from juice import Container, Definition, ServiceProvider


class Mailer:
    def __init__(self, transport):
        self.transport = transport


class Listener:
    def __init__(self, name):
        self.name = name


class MailProvider:
    def register(self, container):
        container.set("mail.transport", "smtp")
        container.set("mailer", Definition.create(Mailer, ["@mail.transport"]))


class ListenerProvider:
    def register(self, container):
        container.set(
            "listener.boot",
            Definition.create(Listener, ["boot"]).tag("event_listener", {"event": "boot"}),
        )
        container.set(
            "listener.shutdown",
            Definition.create(Listener, ["shutdown"]).tag("event_listener", {"event": "shutdown"}),
        )
        container.set("listener.plain", Definition.create(Listener, ["plain"]))


class TestServiceProviders(unittest.TestCase):
    cont: Container

    def setUp(self):
        self.cont = Container()

    def test_provider_satisfies_protocol(self):
        assert isinstance(MailProvider(), ServiceProvider)

    def test_register_invokes_providers_in_order(self):
        class Override:
            def register(self, container):
                container.set("mail.transport", "sendmail")

        result = self.cont.register(MailProvider(), Override())

        assert result is self.cont
        assert self.cont.get("mailer").transport == "sendmail"

    def test_register_does_not_build_services(self):
        built = []

        class Lazy:
            def register(self, container):
                container.set("service", lambda c: built.append(1))

        self.cont.register(Lazy())
        assert built == []
        assert self.cont.has("service")

    def test_find_tagged_returns_ids_and_attributes(self):
        self.cont.register(ListenerProvider())

        tagged = self.cont.find_tagged("event_listener")

        assert tagged == {
            "listener.boot": {"event": "boot"},
            "listener.shutdown": {"event": "shutdown"},
        }
        assert [self.cont.get(id).name for id in tagged] == ["boot", "shutdown"]

    def test_find_tagged_ignores_untagged_and_unknown_tags(self):
        self.cont.register(ListenerProvider())
        self.cont.set("factory", lambda c: Listener("factory"))

        assert self.cont.find_tagged("missing") == {}
        assert "listener.plain" not in self.cont.find_tagged("event_listener")

    def test_find_tagged_still_lists_built_services(self):
        self.cont.register(ListenerProvider())
        self.cont.get("listener.boot")

        assert "listener.boot" in self.cont.find_tagged("event_listener")
