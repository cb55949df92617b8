import logging

from django.conf import settings
from django.contrib import messages
from django.http import Http404
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views import View

from savage_nation.accounts.guards import AdminRequiredMixin, bypass_requested
from savage_nation.core.dialogs import DialogController
from savage_nation.core.exceptions import GatewayError, RecordDecodeError
from savage_nation.core.gateway import get_table
from savage_nation.core.optimistic import OptimisticDelete
from savage_nation.core.query_cache import query_cache
from savage_nation.main.pages import SITE_PAGES, load_page, page_key

from .forms import PageContentForm
from .managers import MANAGERS, get_manager

logger = logging.getLogger(__name__)


def _bypass_query(request):
    if bypass_requested(request) and getattr(settings, "AUTH_BYPASS_ENABLED", False):
        return "?bypass_auth=true"
    return ""


def _redirect_keeping_bypass(request, url):
    return redirect(url + _bypass_query(request))


class AdminDashboardView(AdminRequiredMixin, View):
    template_name = "admin_portal/dashboard.html"

    def get(self, request):
        cards = []
        for manager in MANAGERS:
            result = query_cache.query(manager.query_key, manager.fetch)
            cards.append({
                "manager": manager,
                "count": None if result.is_error else len(result.data or []),
                "url": reverse("admin_portal:manager", args=[manager.slug]),
            })

        context = {
            "cards": cards,
            "pages": [(slug, title) for slug, (title, _description) in SITE_PAGES.items()],
            "active_section": "dashboard",
            "bypass_query": _bypass_query(request),
        }
        return render(request, self.template_name, context)


class ManagerView(AdminRequiredMixin, View):
    """
    List + create/edit dialog for one collection.

    GET ``?dialog=new`` opens an empty dialog, ``?edit=<id>`` opens it on
    that row. POST submits the dialog (``id`` present means update).
    """

    template_name = "admin_portal/manager.html"

    def dispatch(self, request, *args, **kwargs):
        try:
            self.manager = get_manager(kwargs.pop("resource"))
        except KeyError:
            raise Http404("Unknown admin section")
        return super().dispatch(request, *args, **kwargs)

    def list_url(self):
        return reverse("admin_portal:manager", args=[self.manager.slug])

    def get(self, request):
        dialog = DialogController(self.manager.entity)
        form = None

        if request.GET.get("dialog") == "new":
            dialog.open()
            form = self.manager.form_class()
        elif request.GET.get("edit"):
            instance = self._find(request.GET["edit"])
            if instance is None:
                messages.error(request, f"{self.manager.entity} not found.")
                return _redirect_keeping_bypass(request, self.list_url())
            dialog.open(instance)
            form = self.manager.form_class(instance=instance)

        return self._render(request, dialog, form)

    def post(self, request):
        dialog = DialogController(self.manager.entity)
        pk = request.POST.get("id") or None
        instance = None
        if pk:
            instance = self._find(pk)
            if instance is None:
                messages.error(request, f"{self.manager.entity} not found.")
                return _redirect_keeping_bypass(request, self.list_url())

        dialog.open(instance)
        dialog.submit()
        gateway = self.manager.gateway
        try:
            if instance is not None:
                gateway.update(instance.pk, request.POST, partial=False)
            else:
                gateway.insert(request.POST)
        except RecordDecodeError as exc:
            dialog.fail(exc.errors)
            messages.error(request, "Please correct the errors below.")
            form = exc.form or self.manager.form_class(request.POST, instance=instance)
            return self._render(request, dialog, form)
        except GatewayError as exc:
            dialog.fail({"__all__": [str(exc)]})
            messages.error(request, f"Could not save {self.manager.entity.lower()}: {exc}")
            form = self.manager.form_class(request.POST, instance=instance)
            return self._render(request, dialog, form)

        verb = "updated" if dialog.is_editing else "created"
        dialog.succeed()
        query_cache.invalidate(self.manager.query_key)
        messages.success(request, f"{self.manager.entity} {verb}.")
        return _redirect_keeping_bypass(request, self.list_url())

    def _find(self, pk):
        try:
            return self.manager.gateway.select_single(pk=pk)
        except GatewayError as exc:
            logger.warning("Lookup of %s id=%s failed: %s", self.manager.table, pk, exc)
            return None

    def _render(self, request, dialog, form):
        result = query_cache.query(self.manager.query_key, self.manager.fetch)
        context = {
            "manager": self.manager,
            "items": result.data,
            "is_loading": result.is_loading,
            "is_error": result.is_error,
            "dialog": dialog,
            "form": form,
            "active_section": self.manager.slug,
            "bypass_query": _bypass_query(request),
        }
        return render(request, self.template_name, context)


class ManagerDeleteView(AdminRequiredMixin, View):
    def post(self, request, resource, pk):
        try:
            manager = get_manager(resource)
        except KeyError:
            raise Http404("Unknown admin section")

        delete = OptimisticDelete(manager.query_key, manager.gateway.delete)
        try:
            delete(pk)
        except GatewayError as exc:
            messages.error(request, f"Could not delete {manager.entity.lower()}: {exc}")
        else:
            messages.success(request, f"{manager.entity} deleted.")
        return _redirect_keeping_bypass(request, reverse("admin_portal:manager", args=[manager.slug]))


class PageEditorView(AdminRequiredMixin, View):
    """
    Edit the singleton page for a slug. No row yet means create mode; the
    first save inserts it, later saves update it.
    """

    template_name = "admin_portal/page_editor.html"

    def dispatch(self, request, *args, **kwargs):
        self.slug = kwargs.pop("slug")
        if self.slug not in SITE_PAGES:
            raise Http404("Unknown page")
        self.default_title = SITE_PAGES[self.slug][0]
        return super().dispatch(request, *args, **kwargs)

    def get(self, request):
        result = load_page(self.slug)
        if result.is_error:
            messages.error(request, f"Could not load page: {result.error}")
        page = None if result.is_error else result.data
        form = PageContentForm(initial={
            "title": page.title if page else self.default_title,
            "content": page.content if page else "",
        })
        return self._render(request, page, form, load_error=result.error)

    def post(self, request):
        try:
            page = get_table("pages").select_single(slug=self.slug)
        except GatewayError as exc:
            messages.error(request, f"Could not load page: {exc}")
            return self._render(request, None, PageContentForm(request.POST), load_error=exc)

        form = PageContentForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Please correct the errors below.")
            return self._render(request, page, form)

        payload = dict(form.cleaned_data)
        try:
            if page is not None:
                get_table("pages").update(page.pk, payload)
            else:
                get_table("pages").insert({"slug": self.slug, **payload})
        except GatewayError as exc:
            messages.error(request, f"Could not save page: {exc}")
            return self._render(request, page, form)

        query_cache.invalidate(page_key(self.slug))
        query_cache.invalidate(("pages",))
        messages.success(request, "Page updated" if page is not None else "Page created")
        return _redirect_keeping_bypass(request, reverse("admin_portal:page_editor", args=[self.slug]))

    def _render(self, request, page, form, load_error=None):
        context = {
            "slug": self.slug,
            "page": page,
            "mode": "update" if page is not None else "create",
            "default_title": self.default_title,
            "form": form,
            "load_error": load_error,
            "active_section": f"page:{self.slug}",
            "bypass_query": _bypass_query(request),
        }
        return render(request, self.template_name, context)
