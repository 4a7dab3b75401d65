"""Reconciliation strategies, one per entity kind.

Each strategy pages through the GitLab inventory for its kind, compares every
item with what already exists in Gitea and applies the create or update that
brings Gitea in line. Remote errors are never caught here: they propagate and
abort the run.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Dict, List, NamedTuple, Optional, Set

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from ..api.exceptions import NotFoundError
from ..api.gitea import GiteaClient
from ..api.gitlab import GitLabClient
from ..models.common import StateType, to_deadline
from ..models.issue import GiteaIssue, Issue, IssueCreate, IssueEdit
from ..models.label import GiteaLabel, Label, LabelCreate
from ..models.milestone import GiteaMilestone, Milestone, MilestoneCreate
from ..models.organization import Group, OrganizationCreate
from ..models.repository import Project, RepositoryMigrate
from ..models.user import User, UserCreate
from .index import (
    ExistenceIndex,
    build_issue_index,
    build_label_index,
    build_milestone_index,
)
from .keys import issue_key, label_key, milestone_key, organization_key
from .keys import repository_key, user_key
from .pager import Pager

_STATE_MAP = {
    'open': StateType.OPEN,
    'opened': StateType.OPEN,
    'close': StateType.CLOSED,
    'closed': StateType.CLOSED,
}


def map_state(state: Optional[str]) -> Optional[StateType]:
    """Translate a GitLab state string into a Gitea state.

    Returns ``None`` for anything outside the open/closed vocabulary (for
    example a milestone's ``active``). Callers leave the field unset in that
    case so Gitea keeps its default or current value.
    """
    if not state:
        return None
    return _STATE_MAP.get(state)


class MigrationStatus(str, Enum):
    """Outcome of reconciling one entity."""

    COMPLETED = 'completed'
    SKIPPED = 'skipped'
    PLANNED = 'planned'


class ReconciliationDecision(str, Enum):
    """What reconciliation decided to do with a source entity."""

    SKIP = 'skip'
    CREATE = 'create'
    UPDATE = 'update'


class MigrationResult(BaseModel):
    """Result of reconciling one source entity."""

    entity_type: str = Field(..., description='Type of entity migrated')
    entity_id: str = Field(..., description='Natural key of the entity')
    decision: ReconciliationDecision = Field(..., description='Decision taken')
    status: MigrationStatus = Field(..., description='Migration status')
    destination_id: Optional[int] = Field(
        default=None, description='Gitea ID of the created or updated entity'
    )
    completed_at: datetime = Field(
        default_factory=datetime.now, description='When the decision was applied'
    )
    warnings: List[str] = Field(default_factory=list, description='Warning messages')


class UserPresenceCache:
    """Every GitLab username seen during the user phase of the current run.

    Written only while users are migrated and read afterwards, e.g. to tell
    whether a project namespace belongs to a person or to a group.
    """

    def __init__(self):
        self._usernames: Set[str] = set()

    def add(self, username: str) -> None:
        self._usernames.add(username)

    def is_user(self, name: str) -> bool:
        return name in self._usernames

    def __contains__(self, name: object) -> bool:
        return name in self._usernames

    def __len__(self) -> int:
        return len(self._usernames)


class MigrationContext(BaseModel):
    """Context shared by every strategy during one run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    source_client: GitLabClient = Field(..., description='Source GitLab client')
    destination_client: GiteaClient = Field(
        ..., description='Destination Gitea client'
    )

    source_page_size: int = Field(default=100, description='GitLab page size')
    destination_page_size: int = Field(default=50, description='Gitea page size')
    source_token: Optional[str] = Field(
        default=None, description='GitLab token handed to Gitea for mirroring'
    )
    admin_user: str = Field(default='root', description='Owner of created orgs')
    default_password: str = Field(
        default='FD12345678', description='Initial password for created users'
    )
    mirror_interval: str = Field(default='20m', description='Mirror interval')
    dry_run: bool = Field(default=False, description='Perform dry run without changes')

    user_cache: UserPresenceCache = Field(
        default_factory=UserPresenceCache, description='Usernames seen this run'
    )


class RepositoryTarget(NamedTuple):
    """A GitLab project and the Gitea repository it is mirrored to."""

    project_id: int
    owner: str
    name: str

    def __str__(self) -> str:
        return f'{self.owner}/{self.name}'


class MigrationStrategy(ABC):
    """Abstract base class for reconciliation strategies."""

    entity_type = 'entity'

    def __init__(self, context: MigrationContext):
        """Initialize migration strategy.

        Args:
            context: Migration context with clients and settings
        """
        self.context = context
        self.source = context.source_client
        self.destination = context.destination_client
        self.logger = logger.bind(strategy=self.__class__.__name__)

    @abstractmethod
    def source_pager(self) -> Pager:
        """Return a pager over the GitLab inventory for this kind."""

    @abstractmethod
    async def migrate_entity(self, entity: Any) -> MigrationResult:
        """Reconcile a single source entity.

        Args:
            entity: Source entity to reconcile

        Returns:
            Migration result
        """

    async def prepare(self) -> None:
        """Load whatever destination state is needed before the first entity."""

    async def migrate_all(self) -> List[MigrationResult]:
        """Reconcile every source entity of this kind, one at a time."""
        await self.prepare()
        results = []
        async for entity in self.source_pager():
            results.append(await self.migrate_entity(entity))
        return results

    def create_result(
        self,
        entity_id: str,
        decision: ReconciliationDecision,
        status: MigrationStatus = MigrationStatus.COMPLETED,
        **kwargs,
    ) -> MigrationResult:
        return MigrationResult(
            entity_type=self.entity_type,
            entity_id=entity_id,
            decision=decision,
            status=status,
            **kwargs,
        )

    def skipped(self, entity_id: str, **kwargs) -> MigrationResult:
        return self.create_result(
            entity_id, ReconciliationDecision.SKIP, MigrationStatus.SKIPPED, **kwargs
        )

    def planned(
        self, entity_id: str, decision: ReconciliationDecision, **kwargs
    ) -> MigrationResult:
        return self.create_result(entity_id, decision, MigrationStatus.PLANNED, **kwargs)

    @staticmethod
    async def exists(lookup: Awaitable[Any]) -> bool:
        """Await a destination lookup and report whether the entity exists.

        Only a 404 counts as absence; any other error propagates.
        """
        try:
            await lookup
        except NotFoundError:
            return False
        return True


class UserMigrationStrategy(MigrationStrategy):
    """Create missing users. Existing users are left untouched."""

    entity_type = 'user'

    def source_pager(self) -> Pager[User]:
        return Pager(
            self.source.list_users, self.context.source_page_size, description='users'
        )

    async def migrate_entity(self, user: User) -> MigrationResult:
        username = user_key(user)
        self.context.user_cache.add(username)

        if user.is_ghost:
            self.logger.debug(f'Skipping placeholder user {username}')
            return self.skipped(username)

        self.logger.info(f'Migrating user {username}')

        if await self.exists(self.destination.get_user(username)):
            self.logger.info(f'Skipping user {username}, already exists')
            return self.skipped(username)

        options = UserCreate(
            username=username,
            email=user.email,
            full_name=user.name,
            password=self.context.default_password,
        )

        if self.context.dry_run:
            self.logger.info(f'Would create user {username}')
            return self.planned(username, ReconciliationDecision.CREATE)

        created = await self.destination.create_user(options)
        self.logger.info(f'Created user {created.login}')
        return self.create_result(
            username, ReconciliationDecision.CREATE, destination_id=created.id
        )


class OrganizationMigrationStrategy(MigrationStrategy):
    """Create one organization per GitLab group, flattening nested paths."""

    entity_type = 'organization'

    def source_pager(self) -> Pager[Group]:
        async def fetch(page: int, per_page: int):
            return await self.source.list_groups(page, per_page, all_available=True)

        return Pager(fetch, self.context.source_page_size, description='groups')

    async def migrate_entity(self, group: Group) -> MigrationResult:
        name = organization_key(group)
        self.logger.info(f'Migrating organization {name}')

        if await self.exists(self.destination.get_org(name)):
            self.logger.info(f'Skipping organization {name}, already exists')
            return self.skipped(name)

        options = OrganizationCreate(
            username=name,
            full_name=group.name,
            description=group.description,
            website=group.web_url,
        )

        if self.context.dry_run:
            self.logger.info(f'Would create organization {name}')
            return self.planned(name, ReconciliationDecision.CREATE)

        created = await self.destination.create_org(self.context.admin_user, options)
        self.logger.info(f'Created organization {name} ({group.name})')
        return self.create_result(
            name, ReconciliationDecision.CREATE, destination_id=created.id
        )


class RepositoryMigrationStrategy(MigrationStrategy):
    """Mirror-import repositories that do not exist in Gitea yet."""

    entity_type = 'repository'

    def source_pager(self) -> Pager[Project]:
        return Pager(
            self.source.list_projects,
            self.context.source_page_size,
            description='projects',
        )

    @staticmethod
    def target_for(project: Project) -> RepositoryTarget:
        key = repository_key(project)
        return RepositoryTarget(project_id=project.id, owner=key.owner, name=key.name)

    async def migrate_entity(self, project: Project) -> MigrationResult:
        target = self.target_for(project)
        self.logger.info(f'Migrating repository {target}')

        owner_kind = 'user' if self.context.user_cache.is_user(target.owner) else 'org'
        self.logger.debug(f'Owner {target.owner} looks like a {owner_kind}')

        if await self.exists(self.destination.get_repo(target.owner, target.name)):
            self.logger.info(f'Skipping repository {target}, already exists')
            return self.skipped(str(target))

        options = RepositoryMigrate(
            clone_addr=project.http_url_to_repo,
            repo_name=target.name,
            repo_owner=target.owner,
            auth_token=self.context.source_token,
            mirror_interval=self.context.mirror_interval,
            description=project.description,
        )

        if self.context.dry_run:
            self.logger.info(
                f'Would migrate {project.path_with_namespace} to {target}'
            )
            return self.planned(str(target), ReconciliationDecision.CREATE)

        created = await self.destination.migrate_repo(options)
        self.logger.info(f'Migrated repository {target}')
        return self.create_result(
            str(target), ReconciliationDecision.CREATE, destination_id=created.id
        )


class RepositoryScopedStrategy(MigrationStrategy):
    """Base class for strategies that work inside one repository."""

    def __init__(self, context: MigrationContext, target: RepositoryTarget):
        super().__init__(context)
        self.target = target
        self.logger = self.logger.bind(repository=str(target))

    def create_result(self, entity_id: str, *args, **kwargs) -> MigrationResult:
        return super().create_result(f'{self.target}:{entity_id}', *args, **kwargs)


class MilestoneMigrationStrategy(RepositoryScopedStrategy):
    """Create active GitLab milestones that are missing in the repository."""

    entity_type = 'milestone'

    def __init__(self, context: MigrationContext, target: RepositoryTarget):
        super().__init__(context, target)
        self.milestones: Optional[ExistenceIndex[str, GiteaMilestone]] = None

    def source_pager(self) -> Pager[Milestone]:
        # Closed GitLab milestones are not migrated.
        async def fetch(page: int, per_page: int):
            return await self.source.list_milestones(
                self.target.project_id, page, per_page, state='active'
            )

        return Pager(fetch, self.context.source_page_size, description='milestones')

    async def prepare(self) -> None:
        self.milestones = await build_milestone_index(
            self.destination,
            self.target.owner,
            self.target.name,
            self.context.destination_page_size,
        )

    async def migrate_entity(self, milestone: Milestone) -> MigrationResult:
        title = milestone_key(milestone)
        if title in self.milestones:
            self.logger.debug(f'Skipping milestone {title!r}, already exists')
            return self.skipped(title)

        state = map_state(milestone.state)
        if state is None:
            self.logger.debug(
                f'Milestone {title!r} has unmapped state {milestone.state!r}'
            )

        options = MilestoneCreate(
            title=title,
            description=milestone.description,
            due_on=to_deadline(milestone.due_date),
            state=state,
        )

        if self.context.dry_run:
            self.logger.info(f'Would create milestone {title!r}')
            return self.planned(title, ReconciliationDecision.CREATE)

        created = await self.destination.create_milestone(
            self.target.owner, self.target.name, options
        )
        self.milestones.add(title, created)
        self.logger.info(f'Created milestone {title!r}')
        return self.create_result(
            title, ReconciliationDecision.CREATE, destination_id=created.id
        )


class LabelMigrationStrategy(RepositoryScopedStrategy):
    """Create GitLab labels that are missing in the repository."""

    entity_type = 'label'

    def __init__(self, context: MigrationContext, target: RepositoryTarget):
        super().__init__(context, target)
        self.labels: Optional[ExistenceIndex[str, GiteaLabel]] = None

    def source_pager(self) -> Pager[Label]:
        async def fetch(page: int, per_page: int):
            return await self.source.list_labels(self.target.project_id, page, per_page)

        return Pager(fetch, self.context.source_page_size, description='labels')

    async def prepare(self) -> None:
        self.labels = await build_label_index(
            self.destination,
            self.target.owner,
            self.target.name,
            self.context.destination_page_size,
        )

    async def migrate_entity(self, label: Label) -> MigrationResult:
        name = label_key(label)
        if name in self.labels:
            self.logger.debug(f'Skipping label {name!r}, already exists')
            return self.skipped(name)

        # Colors are passed through as-is; both sides use #RRGGBB.
        options = LabelCreate(
            name=name, color=label.color, description=label.description
        )

        if self.context.dry_run:
            self.logger.info(f'Would create label {name!r}')
            return self.planned(name, ReconciliationDecision.CREATE)

        created = await self.destination.create_label(
            self.target.owner, self.target.name, options
        )
        self.labels.add(name, created)
        self.logger.info(f'Created label {name!r} with color {label.color}')
        return self.create_result(
            name, ReconciliationDecision.CREATE, destination_id=created.id
        )


class IssueMigrationStrategy(RepositoryScopedStrategy):
    """Create or update issues, resolving milestone and label references.

    Issues are matched by title. A missing issue is created; an existing one
    gets its fields edited and its label set replaced.
    """

    entity_type = 'issue'

    def __init__(self, context: MigrationContext, target: RepositoryTarget):
        super().__init__(context, target)
        self.issues: Optional[ExistenceIndex[str, GiteaIssue]] = None
        self.milestones: Optional[ExistenceIndex[str, GiteaMilestone]] = None
        self.labels: Optional[ExistenceIndex[str, GiteaLabel]] = None

    def source_pager(self) -> Pager[Issue]:
        async def fetch(page: int, per_page: int):
            return await self.source.list_issues(self.target.project_id, page, per_page)

        return Pager(fetch, self.context.source_page_size, description='issues')

    async def prepare(self) -> None:
        owner, repo = self.target.owner, self.target.name
        per_page = self.context.destination_page_size
        self.issues = await build_issue_index(self.destination, owner, repo, per_page)
        self.milestones = await build_milestone_index(
            self.destination, owner, repo, per_page
        )
        self.labels = await build_label_index(self.destination, owner, repo, per_page)

    def resolve_references(self, issue: Issue) -> Dict[str, Any]:
        """Look up the Gitea IDs of the issue's milestone and labels.

        Unknown references are logged and dropped; they never block the issue.
        """
        warnings = []
        milestone_id = None
        if issue.milestone is not None:
            milestone_id = self.milestones.id_of(issue.milestone.title)
            if milestone_id is None:
                message = f'Unknown milestone {issue.milestone.title!r}'
                self.logger.error(f'{message} on issue {issue.title!r}')
                warnings.append(message)

        label_ids = []
        for name in issue.labels:
            label_id = self.labels.id_of(name)
            if label_id is None:
                message = f'Unknown label {name!r}'
                self.logger.error(f'{message} on issue {issue.title!r}')
                warnings.append(message)
                continue
            label_ids.append(label_id)

        return {'milestone': milestone_id, 'labels': label_ids, 'warnings': warnings}

    async def migrate_entity(self, issue: Issue) -> MigrationResult:
        title = issue_key(issue)
        refs = self.resolve_references(issue)
        body = issue.description or ''
        deadline = to_deadline(issue.due_date)
        state = map_state(issue.state)
        if state is None:
            self.logger.debug(f'Issue {title!r} has unmapped state {issue.state!r}')

        existing = self.issues.get(title)
        if existing is None:
            return await self._create(issue, body, deadline, state, refs)

        options = IssueEdit(
            title=title,
            body=body,
            milestone=refs['milestone'] or 0,
            due_date=deadline,
            state=state,
        )

        if self.context.dry_run:
            self.logger.info(f'Would update issue #{existing.number} {title!r}')
            return self.planned(
                title, ReconciliationDecision.UPDATE, warnings=refs['warnings']
            )

        owner, repo = self.target.owner, self.target.name
        await self.destination.edit_issue(owner, repo, existing.number, options)
        await self.destination.replace_issue_labels(
            owner, repo, existing.number, refs['labels']
        )
        self.logger.info(f'Updated issue #{existing.number} {title!r}')
        return self.create_result(
            title,
            ReconciliationDecision.UPDATE,
            destination_id=existing.id,
            warnings=refs['warnings'],
        )

    async def _create(
        self,
        issue: Issue,
        body: str,
        deadline: Optional[datetime],
        state: Optional[StateType],
        refs: Dict[str, Any],
    ) -> MigrationResult:
        title = issue_key(issue)
        options = IssueCreate(
            title=title,
            body=body,
            due_date=deadline,
            milestone=refs['milestone'],
            labels=refs['labels'],
            closed=True if state == StateType.CLOSED else None,
        )

        if self.context.dry_run:
            self.logger.info(f'Would create issue {title!r}')
            return self.planned(
                title, ReconciliationDecision.CREATE, warnings=refs['warnings']
            )

        created = await self.destination.create_issue(
            self.target.owner, self.target.name, options
        )
        # Later source issues with the same title reconcile against this one.
        self.issues.add(title, created)
        self.logger.info(f'Created issue #{created.number} {title!r}')
        return self.create_result(
            title,
            ReconciliationDecision.CREATE,
            destination_id=created.id,
            warnings=refs['warnings'],
        )


REPOSITORY_SCOPED_STRATEGIES = (
    MilestoneMigrationStrategy,
    LabelMigrationStrategy,
    IssueMigrationStrategy,
)
