import pytest

from gitsnip.application.dto.snippet_input_dto import SnippetFileInput, SnippetInputDTO, Viewer
from gitsnip.application.services.access_policy import AccessPolicy
from gitsnip.application.services.snippet_service import SnippetService
from gitsnip.domain.errors import AuthenticationRequiredError, PermissionDeniedError

OWNER = Viewer(username="ada", credential="tok-ada")
STRANGER = Viewer(username="mallory", credential="tok-m")
ANON = Viewer()


def _dto(title="t", public=True):
    return SnippetInputDTO(title=title, files=[SnippetFileInput("a.py", "x")], is_public=public)


@pytest.fixture
def service(repository, reader):
    return SnippetService(repository, reader, AccessPolicy(["ada"]))


@pytest.mark.asyncio
async def test_writes_require_identity_and_authorization(service):
    with pytest.raises(AuthenticationRequiredError):
        await service.create_snippet(_dto(), ANON)
    with pytest.raises(AuthenticationRequiredError):
        await service.create_snippet(_dto(), Viewer(username="ada"))
    with pytest.raises(PermissionDeniedError):
        await service.create_snippet(_dto(), STRANGER)

    created = await service.create_snippet(_dto(), OWNER)
    with pytest.raises(PermissionDeniedError):
        await service.update_snippet(created.id, _dto("x"), STRANGER)
    with pytest.raises(PermissionDeniedError):
        await service.delete_snippet(created.id, STRANGER)
    assert await service.delete_snippet(created.id, OWNER) is True


@pytest.mark.asyncio
async def test_private_snippets_hidden_from_unauthorized(service, clock):
    public = await service.create_snippet(_dto("pub"), OWNER)
    clock.advance(5)
    private = await service.create_snippet(_dto("priv", public=False), OWNER)

    assert [s.id for s in await service.list_snippets(OWNER)] == [private.id, public.id]
    assert [s.id for s in await service.list_snippets(ANON)] == [public.id]
    assert [s.id for s in await service.list_snippets(STRANGER)] == [public.id]

    with pytest.raises(PermissionDeniedError):
        await service.get_snippet(private.id, ANON)
    with pytest.raises(PermissionDeniedError):
        await service.list_revisions(private.id, ANON)
    assert (await service.get_snippet(private.id, OWNER)).title == "priv"


@pytest.mark.asyncio
async def test_revision_queries_for_missing_snippet_return_none(service):
    assert await service.list_revisions("missing", OWNER) is None
    assert await service.get_revision("missing", "sha", OWNER) is None
    assert await service.get_revision_diff("missing", "sha", OWNER) is None


@pytest.mark.asyncio
async def test_revision_queries_delegate(service, store):
    created = await service.create_snippet(_dto(), OWNER)
    head = store.head

    revisions = await service.list_revisions(created.id, ANON, limit=1)
    assert [r.sha for r in revisions] == [head]
    assert (await service.get_revision(created.id, head, ANON)).filenames == ["a.py"]
    assert (await service.get_revision_diff(created.id, head, ANON)).sha == head


def test_open_allow_list_authorizes_everyone(repository, reader):
    service = SnippetService(repository, reader)
    assert service.is_authorized(STRANGER)
    assert not service.is_authorized(ANON)
