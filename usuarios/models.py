from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone


class UserManager(BaseUserManager, models.Manager):
    use_in_migrations = True

    def _create_user(self, email, password, is_staff, is_superuser, **extra_fields):
        if not email:
            raise ValueError('El correo electrónico es obligatorio')
        user = self.model(
            email=self.normalize_email(email),
            is_staff=is_staff,
            is_superuser=is_superuser,
            **extra_fields
        )
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        return self._create_user(email, password, False, False, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('rol', User.ROL_ADMIN)
        return self._create_user(email, password, True, True, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """Usuario del directorio; inicia sesión con su correo."""

    ROL_USUARIO = 'user'
    ROL_PROPIETARIO = 'business_owner'
    ROL_ADMIN = 'admin'

    ROL_CHOICES = (
        (ROL_USUARIO, 'Usuario'),
        (ROL_PROPIETARIO, 'Propietario de negocio'),
        (ROL_ADMIN, 'Administrador'),
    )

    IDIOMA_CHOICES = (
        ('es', 'Español'),
        ('en', 'English'),
    )

    email = models.EmailField(unique=True)
    full_name = models.CharField('Nombre completo', max_length=100, blank=True)
    rol = models.CharField(max_length=20, choices=ROL_CHOICES, default=ROL_USUARIO)
    idioma_preferido = models.CharField(max_length=2, choices=IDIOMA_CHOICES, default='es')

    is_staff = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    date_joined = models.DateTimeField(default=timezone.now)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = 'Usuario'
        verbose_name_plural = 'Usuarios'

    def __str__(self):
        return self.email

    def get_full_name(self):
        return self.full_name or self.email

    def get_short_name(self):
        return self.email.split('@')[0]

    @property
    def es_admin(self):
        return self.is_superuser or self.rol == self.ROL_ADMIN
