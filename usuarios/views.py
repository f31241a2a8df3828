import logging

from django.contrib.auth import login, logout
from django.http import HttpResponseRedirect
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.generic import FormView, View

from directorio.utils.idioma import idioma_desde_request
from directorio.utils.rutas import ruta_localizada

from .forms import LoginForm, UserRegisterForm
from .models import User

logger = logging.getLogger(__name__)


def _destino_seguro(request, idioma):
    destino = request.POST.get('next') or request.GET.get('next')
    if destino and url_has_allowed_host_and_scheme(destino, allowed_hosts={request.get_host()}):
        return destino
    return ruta_localizada('usuario', idioma)


class LoginUser(FormView):
    template_name = 'usuarios/login.html'
    form_class = LoginForm

    def get_form_kwargs(self):
        kwargs = super().get_form_kwargs()
        kwargs['request'] = self.request
        return kwargs

    def form_valid(self, form):
        user = form.get_user()
        login(self.request, user)
        idioma = getattr(user, 'idioma_preferido', None) or idioma_desde_request(self.request).idioma
        return HttpResponseRedirect(_destino_seguro(self.request, idioma))


class UserRegisterView(FormView):
    template_name = 'usuarios/registro.html'
    form_class = UserRegisterForm

    def form_valid(self, form):
        user = User.objects.create_user(
            form.cleaned_data['email'],
            form.cleaned_data['password1'],
            full_name=form.cleaned_data['full_name'],
            idioma_preferido=form.cleaned_data['idioma_preferido'],
        )
        logger.info("Nuevo usuario registrado: %s", user.email)
        login(self.request, user, backend='django.contrib.auth.backends.ModelBackend')
        return HttpResponseRedirect(ruta_localizada('usuario', user.idioma_preferido))


class LogoutView(View):

    def get(self, request, *args, **kwargs):
        idioma = idioma_desde_request(request).idioma
        logout(request)
        return HttpResponseRedirect(ruta_localizada('', idioma))

    post = get
