"""Behavior units of the example Shop app.

Import this module before opening pages so the units register with the
default catalog.
"""

from devium.components import BehaviorUnit, default_catalog


@default_catalog.unit("Shop", "Login", "Android_9")
class LoginAndroid9(BehaviorUnit):
    def sign_in(self, username, password):
        self.driver.type(self.locator("login.username"), username)
        self.driver.type(self.locator("login.password"), password)
        self.driver.tap(self.locator("login.submit"))

    def goto_page_home(self, page):
        self.sign_in(*self.device.get_secret("subscribers", random=True))
        return page


@default_catalog.unit("Shop", "Login", "Ios_15")
class LoginIos15(LoginAndroid9):
    def sign_in(self, username, password):
        super().sign_in(username, password)
        self.driver.hide_keyboard()


@default_catalog.unit("Shop", "Login", "TV_9")
class LoginTv9(BehaviorUnit):
    def sign_in(self, username, password):
        # TV login is done through a companion device code
        self.driver.tap(self.locator("login.submit"))
