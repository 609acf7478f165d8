"""
Explicit task hierarchy built from a flat task list.

A task's ``parent_id`` decides its parent when it names a known task.
Otherwise the parent is inferred from list order and ``level``: the nearest
earlier task with a lower level.
"""


class TaskTree:
    """Tasks indexed by id with parent and children links, kept in input order."""

    def __init__(self, tasks):
        self.tasks = {}
        self.order = []
        self.children = {}
        self.roots = []
        self.parents = {}

        for task in tasks:
            self.tasks[task.id] = task
            self.order.append(task.id)
            self.children[task.id] = []

        # Stack of (level, id) for the open ancestors of the current row.
        ancestors = []
        for task in tasks:
            while ancestors and ancestors[-1][0] >= task.level:
                ancestors.pop()
            parent_id = task.parent_id if task.parent_id in self.tasks else None
            if parent_id is None and ancestors:
                parent_id = ancestors[-1][1]
            if parent_id is None or self._is_ancestor(task.id, parent_id):
                self.roots.append(task.id)
            else:
                self.parents[task.id] = parent_id
                self.children[parent_id].append(task.id)
            ancestors.append((task.level, task.id))

    def _is_ancestor(self, task_id, other_id):
        """True when *task_id* is *other_id* or one of its recorded ancestors."""
        current = other_id
        while current is not None:
            if current == task_id:
                return True
            current = self.parents.get(current)
        return False

    @classmethod
    def from_tasks(cls, tasks):
        return cls(tasks)

    def descendants(self, task_id):
        """All tasks below *task_id*, depth first."""
        found = []
        stack = list(reversed(self.children[task_id]))
        while stack:
            current = stack.pop()
            found.append(current)
            stack.extend(reversed(self.children[current]))
        return found

    def post_order(self):
        """Ids with every child before its parent."""
        visited = []
        for root in self.roots:
            stack = [(root, False)]
            while stack:
                task_id, expanded = stack.pop()
                if expanded:
                    visited.append(task_id)
                    continue
                stack.append((task_id, True))
                stack.extend((child, False) for child in reversed(self.children[task_id]))
        return visited

    def to_list(self):
        """Tasks in their original order."""
        return [self.tasks[task_id] for task_id in self.order]
