from .tests import router as tests_router

routes = [
    tests_router,
]
