import flet as ft

from firebasemanager.core.query import OPERATORS
from firebasemanager.state.app_state import AppState
from firebasemanager.state.query_explorer import QueryExplorer
from firebasemanager.state.session_state import NotReadyError


def build_firestore_panel(page: ft.Page, app_state: AppState) -> ft.Control:
    explorer = QueryExplorer(app_state.session, app_state.bookmarks)

    collection = ft.Dropdown(label="Collection", width=320)
    new_collection = ft.TextField(label="Add collection", width=240)
    condition_rows = ft.Column(spacing=8)
    order_rows = ft.Column(spacing=8)
    limit = ft.TextField(label="Limit", value=explorer.limit_text, width=120, keyboard_type=ft.KeyboardType.NUMBER)
    execute_button = ft.ElevatedButton("Execute Query", icon=ft.Icons.SEARCH)
    error_text = ft.Text(color=ft.Colors.RED_400)
    result_count = ft.Text()
    results = ft.TextField(
        multiline=True,
        read_only=True,
        min_lines=16,
        max_lines=24,
        text_style=ft.TextStyle(font_family="monospace", size=12),
    )

    def show_message(message: str) -> None:
        page.open(ft.SnackBar(ft.Text(message)))

    def refresh_collections() -> None:
        collection.options = [ft.dropdown.Option(name) for name in explorer.bookmarks.names]
        collection.value = explorer.selected_collection or None

    def on_collection_change(e) -> None:
        explorer.select_collection(collection.value or "")

    def on_add_collection(_):
        name = (new_collection.value or "").strip()
        if not name:
            return
        if explorer.add_collection(name):
            show_message(f'"{name}" has been added to your collections.')
        new_collection.value = ""
        refresh_collections()
        page.update()

    def on_remove_collection(_):
        name = explorer.selected_collection
        if not name:
            return
        explorer.remove_collection(name)
        show_message(f'"{name}" has been removed from your collections.')
        refresh_collections()
        page.update()

    def refresh_conditions() -> None:
        condition_rows.controls.clear()
        for index, condition in enumerate(explorer.conditions):

            def make_update(i: int, key: str):
                def handler(e):
                    explorer.update_condition(i, **{key: e.control.value or ""})

                return handler

            def make_remove(i: int):
                def handler(_):
                    explorer.remove_condition(i)
                    refresh_conditions()
                    page.update()

                return handler

            condition_rows.controls.append(
                ft.Row(
                    controls=[
                        ft.TextField(label="Field", value=condition.field, expand=True, on_change=make_update(index, "field")),
                        ft.Dropdown(
                            width=180,
                            value=condition.operator,
                            options=[ft.dropdown.Option(op) for op in OPERATORS],
                            on_change=make_update(index, "operator"),
                        ),
                        ft.TextField(label="Value", value=condition.value, expand=True, on_change=make_update(index, "value")),
                        ft.IconButton(icon=ft.Icons.DELETE_OUTLINE, on_click=make_remove(index)),
                    ]
                )
            )

    def refresh_orders() -> None:
        order_rows.controls.clear()
        for index, order in enumerate(explorer.orders):

            def make_update(i: int, key: str):
                def handler(e):
                    explorer.update_order(i, **{key: e.control.value or ""})

                return handler

            def make_remove(i: int):
                def handler(_):
                    explorer.remove_order(i)
                    refresh_orders()
                    page.update()

                return handler

            order_rows.controls.append(
                ft.Row(
                    controls=[
                        ft.TextField(label="Field", value=order.field, expand=True, on_change=make_update(index, "field")),
                        ft.Dropdown(
                            width=160,
                            value=order.direction,
                            options=[ft.dropdown.Option("asc", "Ascending"), ft.dropdown.Option("desc", "Descending")],
                            on_change=make_update(index, "direction"),
                        ),
                        ft.IconButton(icon=ft.Icons.DELETE_OUTLINE, on_click=make_remove(index)),
                    ]
                )
            )

    def on_add_condition(_):
        explorer.add_condition()
        refresh_conditions()
        page.update()

    def on_add_order(_):
        explorer.add_order()
        refresh_orders()
        page.update()

    def render_results() -> None:
        count = len(explorer.results)
        result_count.value = f"{count} document{'' if count == 1 else 's'}"
        results.value = explorer.results_json()
        error_text.value = explorer.error or ""

    async def on_execute(_):
        explorer.limit_text = limit.value or ""
        execute_button.disabled = True
        execute_button.text = "Executing..."
        page.update()
        try:
            await explorer.execute()
        except NotReadyError as exc:
            show_message(str(exc))
        finally:
            execute_button.disabled = explorer.is_executing
            execute_button.text = "Execute Query"
        render_results()
        refresh_collections()
        page.update()

    collection.on_change = on_collection_change
    execute_button.on_click = on_execute
    refresh_collections()
    render_results()

    return ft.Container(
        padding=20,
        content=ft.Column(
            scroll=ft.ScrollMode.AUTO,
            controls=[
                ft.Text("Firestore Explorer", size=22, weight=ft.FontWeight.BOLD),
                ft.Row(
                    controls=[
                        collection,
                        ft.IconButton(icon=ft.Icons.DELETE_OUTLINE, tooltip="Remove collection", on_click=on_remove_collection),
                        new_collection,
                        ft.IconButton(icon=ft.Icons.ADD, tooltip="Add collection", on_click=on_add_collection),
                    ]
                ),
                ft.Row(
                    controls=[
                        ft.Text("Where Conditions", weight=ft.FontWeight.BOLD),
                        ft.TextButton("Add Condition", icon=ft.Icons.ADD, on_click=on_add_condition),
                    ]
                ),
                condition_rows,
                ft.Row(
                    controls=[
                        ft.Text("Order By", weight=ft.FontWeight.BOLD),
                        ft.TextButton("Add Order", icon=ft.Icons.ADD, on_click=on_add_order),
                    ]
                ),
                order_rows,
                limit,
                execute_button,
                error_text,
                ft.Divider(),
                ft.Row(controls=[ft.Text("Query Results", size=18, weight=ft.FontWeight.BOLD), result_count]),
                results,
            ],
        ),
    )
