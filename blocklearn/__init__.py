import blocklearn.utils.i18n  # noqa:F401
