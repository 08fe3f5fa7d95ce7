from setuptools import setup, find_packages

setup(
    name="ghadaq_dashboard",
    version="1.0.0",
    packages=find_packages(exclude=("tests", "tests.*", "migrations")),
    include_package_data=True,
    package_data={
        "dashboard": [
            "templates/*.html",
            "static/css/*.css",
            "static/js/*.js",
            "translations/*/LC_MESSAGES/*.po",
        ],
    },
    python_requires=">=3.10",
    install_requires=[
        'flask',
        'flask-sqlalchemy',
        'flask-migrate',
        'flask-login',
        'flask-wtf',
        'flask-babel',
        'python-dotenv',
        'werkzeug',
        'email-validator',
        'pillow',
        'requests',
        'cloudinary'
    ],
    extras_require={
        'test': [
            'pytest',
        ],
        'postgres': [
            'psycopg2-binary',
        ],
    },
)
